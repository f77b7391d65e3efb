from typing import Optional

VALID_STATUSES = {"pending", "approved", "rejected", "returned"}
VALID_ASSET_TYPES = {"Returnable", "Non-returnable"}
VALID_ORDERS = {"asc", "desc"}


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value == "":
        return None
    return value


def normalize_status(status: Optional[str]) -> Optional[str]:
    if status in VALID_STATUSES:
        return status
    return None


def normalize_asset_type(asset_type: Optional[str]) -> Optional[str]:
    if asset_type in VALID_ASSET_TYPES:
        return asset_type
    return None


def normalize_order(order: str) -> str:
    if order in VALID_ORDERS:
        return order
    return "desc"
