import hashlib
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from booking_quotes.domain.pricing.errors import ConfigurationError, ServiceNotFound
from booking_quotes.domain.pricing.validation import parse_service_config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceCatalog:
    catalog_id: str
    catalog_version: str
    config_hash: str
    services: Dict[str, Any]

    def get(self, service_id: str):
        try:
            return self.services[service_id]
        except KeyError:
            raise ServiceNotFound(detail=f"Service '{service_id}' not found") from None

    def service_ids(self) -> List[str]:
        return sorted(self.services)


def _canonical_json(data: Dict[str, Any]) -> str:
    return json.dumps(data, sort_keys=True, separators=(",", ":"))


def _resolve_catalog_path(path: str) -> Path:
    candidate = Path(path)
    if candidate.is_absolute():
        return candidate
    cwd_candidate = (Path.cwd() / candidate).resolve()
    if cwd_candidate.exists():
        return cwd_candidate
    module_candidate = Path(__file__).resolve().parents[3] / candidate
    if module_candidate.exists():
        return module_candidate
    raise FileNotFoundError(f"Service catalog not found at {path}")


def build_service_catalog(data: Dict[str, Any]) -> ServiceCatalog:
    try:
        catalog_id = str(data["catalog_id"])
        catalog_version = str(data["catalog_version"])
        raw_services = data["services"]
    except KeyError as exc:
        raise ConfigurationError(detail=f"Service catalog is missing '{exc.args[0]}'") from exc
    if not isinstance(raw_services, dict):
        raise ConfigurationError(detail="Service catalog 'services' must be an object keyed by service id")

    services = {
        service_id: parse_service_config(raw, service_id=service_id) for service_id, raw in raw_services.items()
    }
    config_hash = hashlib.sha256(_canonical_json(data).encode("utf-8")).hexdigest()
    return ServiceCatalog(
        catalog_id=catalog_id,
        catalog_version=catalog_version,
        config_hash=f"sha256:{config_hash}",
        services=services,
    )


def load_service_catalog(path: str) -> ServiceCatalog:
    resolved_path = _resolve_catalog_path(path)
    data = json.loads(resolved_path.read_text(encoding="utf-8"))
    catalog = build_service_catalog(data)
    logger.info(
        "service_catalog_loaded",
        extra={
            "extra": {
                "catalog_id": catalog.catalog_id,
                "catalog_version": catalog.catalog_version,
                "services": len(catalog.services),
            }
        },
    )
    return catalog
