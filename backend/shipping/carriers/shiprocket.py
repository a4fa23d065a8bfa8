"""
Shiprocket logistics API client.

One bearer token per client instance, obtained by credential login (or given
up front as an API token) and reused for every call. Nothing here retries: a
failure is raised with the provider's message so the operator can act on it.
"""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

import requests
from django.conf import settings

from pricing.services.utils import d

from . import AwbAssignment, CarrierRate, ShipmentRef, TrackingScan, TrackingSnapshot
from .errors import CarrierAuthError, CarrierRequestError, ServiceabilityError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://apiv2.shiprocket.in/v1/external"


def _provider_message(payload: Any) -> str:
    if isinstance(payload, dict):
        for key in ("message", "error", "errors", "detail"):
            if payload.get(key):
                return str(payload[key])
    return ""


def order_payload(order, pickup_location: str) -> Dict[str, Any]:
    """Shiprocket adhoc order body for a persisted order."""
    weight_kg = (d(order.total_weight) / Decimal(1000)) if order.total_weight else Decimal("0.5")
    return {
        "order_id": str(order.pk),
        "order_date": order.created_at.strftime("%Y-%m-%d %H:%M"),
        "pickup_location": pickup_location,
        "billing_customer_name": order.shipping_name,
        "billing_last_name": "",
        "billing_address": order.shipping_address,
        "billing_city": order.shipping_city,
        "billing_state": order.shipping_state,
        "billing_pincode": order.shipping_pincode,
        "billing_country": "India",
        "billing_email": order.shipping_email,
        "billing_phone": order.shipping_phone,
        "shipping_is_billing": True,
        "order_items": [
            {
                "name": item.name,
                "sku": item.sku or "N/A",
                "units": item.quantity,
                "selling_price": str(item.price_at_purchase),
            }
            for item in order.items.all()
        ],
        "payment_method": "COD" if order.payment_method == "cod" else "Prepaid",
        "sub_total": str(order.subtotal),
        "weight": str(weight_kg.quantize(Decimal("0.001"))),
        "length": 10,
        "breadth": 10,
        "height": 10,
    }


class ShiprocketClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        email: Optional[str] = None,
        password: Optional[str] = None,
        token: Optional[str] = None,
        timeout: float = 15,
        pickup_location: str = "Primary",
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.email = email
        self.password = password
        self.timeout = timeout
        self.pickup_location = pickup_location
        self._token = token or None
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    @classmethod
    def from_settings(cls) -> "ShiprocketClient":
        fulfillment = getattr(settings, "FULFILLMENT", {})
        return cls(
            base_url=getattr(settings, "SHIPROCKET_API_URL", DEFAULT_BASE_URL),
            email=getattr(settings, "SHIPROCKET_EMAIL", "") or None,
            password=getattr(settings, "SHIPROCKET_PASSWORD", "") or None,
            token=getattr(settings, "SHIPROCKET_API_TOKEN", "") or None,
            timeout=fulfillment.get("CARRIER_TIMEOUT", 15),
            pickup_location=fulfillment.get("PICKUP_LOCATION", "Primary"),
        )

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    @staticmethod
    def _decode(resp) -> Any:
        try:
            return resp.json()
        except ValueError:
            return {"raw": resp.text}

    # --------------------- session ---------------------

    def authenticate(self) -> str:
        if self._token:
            return self._token
        if not (self.email and self.password):
            raise CarrierAuthError("Shiprocket credentials not configured. Set SHIPROCKET_API_KEY or SHIPROCKET_EMAIL/SHIPROCKET_PASSWORD")

        try:
            resp = self.session.request(
                "POST",
                self._url("/auth/login"),
                json={"email": self.email, "password": self.password},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise CarrierAuthError(f"Shiprocket login failed: {exc}") from exc

        payload = self._decode(resp)
        token = payload.get("token") if isinstance(payload, dict) else None
        if resp.status_code != 200 or not token:
            message = _provider_message(payload) or f"HTTP {resp.status_code}"
            logger.warning("Shiprocket authentication failed: %s", message)
            raise CarrierAuthError(f"Shiprocket authentication failed: {message}", resp.status_code, payload)

        self._token = token
        logger.info("Shiprocket authentication successful")
        return token

    def _request(self, method: str, path: str, params: Optional[dict] = None, json: Optional[dict] = None) -> Any:
        token = self.authenticate()
        try:
            resp = self.session.request(
                method,
                self._url(path),
                params=params,
                json=json,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Shiprocket %s %s failed: %s", method, path, exc)
            raise CarrierRequestError(f"Shiprocket {method} {path} failed: {exc}") from exc

        payload = self._decode(resp)
        if resp.status_code in (401, 403):
            # No refresh: the caller re-authenticates
            self._token = None
            raise CarrierAuthError(
                f"Shiprocket rejected the session: {_provider_message(payload) or resp.status_code}",
                resp.status_code,
                payload,
            )
        if not 200 <= resp.status_code < 300:
            message = _provider_message(payload) or f"HTTP {resp.status_code}"
            logger.warning("Shiprocket %s %s returned %s: %s", method, path, resp.status_code, message)
            raise CarrierRequestError(message, resp.status_code, payload)
        return payload

    # --------------------- operations ---------------------

    def quote_rates(self, pickup_pincode: str, delivery_pincode: str, weight_kg, cod: bool = False) -> List[CarrierRate]:
        params = {
            "pickup_postcode": pickup_pincode,
            "delivery_postcode": delivery_pincode,
            "weight": str(d(weight_kg)),
            "cod": 1 if cod else 0,
        }
        try:
            payload = self._request("GET", "/courier/courierListWithRate", params=params)
        except CarrierRequestError as exc:
            if exc.status_code == 404:
                raise ServiceabilityError(
                    f"Pincode {delivery_pincode} is not serviceable from {pickup_pincode}. Please try another location.",
                    exc.status_code,
                    exc.payload,
                ) from exc
            raise

        rows = payload.get("rates") or (payload.get("data") or {}).get("available_courier_companies") or []
        if not rows:
            raise ServiceabilityError(
                f"No shipping routes available for {pickup_pincode} -> {delivery_pincode}",
                payload=payload,
            )

        rates = []
        for row in rows:
            try:
                courier_id = int(row.get("courier_company_id"))
            except (TypeError, ValueError):
                logger.warning("Skipping Shiprocket rate row without a courier id: %r", row)
                continue
            etd = row.get("etd") or row.get("estimated_delivery_days")
            rates.append(CarrierRate(
                courier_id=courier_id,
                courier_name=row.get("courier_name", ""),
                rate=d(row.get("rate", 0)),
                estimated_days=str(etd) if etd is not None else None,
                raw=row,
            ))
        if not rates:
            raise CarrierRequestError("Shiprocket returned rate rows without courier ids", payload=payload)
        return rates

    def create_shipment(self, order) -> ShipmentRef:
        body = order_payload(order, self.pickup_location)
        payload = self._request("POST", "/orders/create/adhoc", json=body)
        if not payload.get("shipment_id"):
            raise CarrierRequestError(
                _provider_message(payload) or "Failed to create Shiprocket order",
                payload=payload,
            )
        return ShipmentRef(
            external_order_id=str(payload.get("order_id")),
            shipment_id=str(payload.get("shipment_id")),
            raw=payload,
        )

    def assign_carrier(self, shipment_id, courier_id) -> AwbAssignment:
        payload = self._request(
            "POST",
            "/courier/assign/awb",
            json={"shipment_id": int(shipment_id), "courier_id": int(courier_id)},
        )
        data = (payload.get("response") or {}).get("data") or payload
        awb = data.get("awb_code")
        if payload.get("awb_assign_status") == 0 or not awb:
            message = _provider_message(payload) or data.get("awb_assign_error") or "Failed to assign courier"
            raise CarrierRequestError(str(message), payload=payload)
        courier_id_val = data.get("courier_company_id")
        return AwbAssignment(
            awb_code=str(awb),
            courier_name=data.get("courier_name", ""),
            courier_id=int(courier_id_val) if courier_id_val else int(courier_id),
            raw=payload,
        )

    def schedule_pickup(self, shipment_id, pickup_date: Optional[date] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"shipment_id": [int(shipment_id)]}
        if pickup_date is not None:
            body["pickup_date"] = [pickup_date.isoformat()]
        return self._request("POST", "/courier/generate/pickup", json=body)

    def track(self, awb_code: str) -> TrackingSnapshot:
        payload = self._request("GET", f"/courier/track/awb/{awb_code}")
        data = payload.get("tracking_data") or {}

        current = data.get("current_status")
        if not current and data.get("shipment_track"):
            current = data["shipment_track"][0].get("current_status")

        scans = [
            TrackingScan(
                date=str(scan.get("date", "")),
                status=str(scan.get("status") or scan.get("sr-status-label") or ""),
                activity=str(scan.get("activity", "")),
                location=str(scan.get("location", "")),
            )
            for scan in (data.get("scans") or data.get("shipment_track_activities") or [])
        ]
        return TrackingSnapshot(
            awb_code=awb_code,
            shipment_status=str(data.get("shipment_status") or ""),
            current_status=str(current or ""),
            scans=scans,
            raw=payload,
        )

    def cancel_shipment(self, external_order_id) -> Dict[str, Any]:
        return self._request("POST", "/orders/cancel", json={"ids": [int(external_order_id)]})

    def generate_label(self, shipment_id) -> str:
        payload = self._request("POST", "/courier/generate/label", json={"shipment_id": [int(shipment_id)]})
        url = payload.get("label_url")
        if not url:
            raise CarrierRequestError(_provider_message(payload) or "Label not generated", payload=payload)
        return url
