"""Institution map registry.

The maps file is a JSON object keyed by institution. Each entry binds the
statement's column names and describes the target account::

    {
      "chase_visa": {
        "dateFormat": "MM/dd/yyyy",
        "Date": "Transaction Date",
        "Amount": "Amount",
        "Payee": "Description",
        "BankCategory": "Category",
        "account": {"name": "Visa", "type": "credit", "initial_balance": 0},
        "category_mappings": [{"bank_cat": "Dining", "internal_cat": "Dining"}],
        "rules": [{"match": "amazon", "category": "Shopping"}]
      }
    }
"""

import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Mapping, Optional

from finimport.domain.classification import compile_rules
from finimport.domain.entities import AccountDescriptor, CategoryMapping, InstitutionConfig
from finimport.domain.errors import ConfigError, unknown_institution

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("Date", "Amount", "Payee")


def _required_string(raw: Mapping[str, Any], field: str, key: str) -> str:
    value = raw.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"Institution '{key}' is missing required field '{field}'")
    return value.strip()


def _optional_string(raw: Mapping[str, Any], field: str) -> Optional[str]:
    value = raw.get(field)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def parse_account_descriptor(raw: Any, key: str) -> AccountDescriptor:
    """Validate the ``account`` block of an institution entry."""
    if not isinstance(raw, dict) or not raw.get("name"):
        raise ConfigError(f"Institution '{key}' is missing 'account' configuration with a name")

    try:
        initial_balance = Decimal(str(raw.get("initial_balance") or 0))
    except InvalidOperation:
        raise ConfigError(
            f"Institution '{key}' has invalid initial_balance {raw.get('initial_balance')!r}"
        )

    return AccountDescriptor(
        name=str(raw["name"]),
        type=str(raw.get("type") or "checking"),
        initial_balance=initial_balance,
    )


def parse_category_mappings(raw: Any, key: str) -> tuple[CategoryMapping, ...]:
    """Validate the optional ``category_mappings`` list."""
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ConfigError(f"'category_mappings' for '{key}' must be a list")

    mappings = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("bank_cat") or not item.get("internal_cat"):
            raise ConfigError(
                f"Category mapping {item!r} for '{key}' needs 'bank_cat' and 'internal_cat'"
            )
        mappings.append(CategoryMapping(bank_cat=str(item["bank_cat"]), internal_cat=str(item["internal_cat"])))
    return tuple(mappings)


def parse_institution_config(key: str, raw: Any) -> InstitutionConfig:
    """Build a typed InstitutionConfig from one raw maps entry.

    Raises:
        ConfigError: If a required binding is missing or a section is malformed
    """
    if not isinstance(raw, dict):
        raise ConfigError(f"Institution '{key}' must be an object")

    date_format = _optional_string(raw, "dateFormat")
    if date_format is None:
        logger.info("Institution '%s' has no dateFormat; dates will be parsed leniently", key)

    return InstitutionConfig(
        key=key,
        date_column=_required_string(raw, "Date", key),
        amount_column=_required_string(raw, "Amount", key),
        payee_column=_required_string(raw, "Payee", key),
        bank_category_column=_optional_string(raw, "BankCategory"),
        date_format=date_format,
        account=parse_account_descriptor(raw.get("account"), key),
        category_mappings=parse_category_mappings(raw.get("category_mappings"), key),
        rules=compile_rules(raw.get("rules"), key),
    )


class InstitutionMapRegistry:
    """Registry of institution configurations loaded from the maps file."""

    def __init__(
        self,
        configs: Mapping[str, InstitutionConfig],
        invalid: Optional[Mapping[str, str]] = None,
    ):
        """Initialize the registry.

        Args:
            configs: Valid configurations by institution key
            invalid: Validation failure messages for keys that could not be parsed
        """
        self._configs = dict(configs)
        self._invalid = dict(invalid or {})

    @classmethod
    def from_dict(cls, raw: Any) -> "InstitutionMapRegistry":
        """Build a registry from decoded maps data.

        Raises:
            ConfigError: If the top level is not an object
        """
        if not isinstance(raw, dict):
            raise ConfigError("Institution maps must be a JSON object keyed by institution")

        configs: dict[str, InstitutionConfig] = {}
        invalid: dict[str, str] = {}
        for key, entry in raw.items():
            try:
                configs[key] = parse_institution_config(key, entry)
            except ConfigError as e:
                logger.warning("Institution '%s' is not usable: %s", key, e)
                invalid[key] = str(e)
        return cls(configs, invalid)

    @classmethod
    def load(cls, path: str | Path) -> "InstitutionMapRegistry":
        """Load the maps file.

        Raises:
            ConfigError: If the file is missing or is not valid JSON
        """
        maps_path = Path(path)
        if not maps_path.is_file():
            raise ConfigError(f"Institution maps file not found: {maps_path}")

        try:
            with open(maps_path, "r", encoding="utf-8-sig") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not parse institution maps file {maps_path}: {e}") from e

        registry = cls.from_dict(raw)
        logger.info("Loaded %d institution maps from %s", len(registry.keys()), maps_path)
        return registry

    def keys(self) -> list[str]:
        """Return every configured institution key, usable or not."""
        return sorted(set(self._configs) | set(self._invalid))

    def __contains__(self, key: object) -> bool:
        return key in self._configs or key in self._invalid

    def get(self, key: str) -> InstitutionConfig:
        """Resolve an institution key.

        Raises:
            ConfigError: If the key is unknown or its entry failed validation
        """
        if key in self._invalid:
            raise ConfigError(f"Institution '{key}' is misconfigured: {self._invalid[key]}")
        config = self._configs.get(key)
        if config is None:
            raise ConfigError(unknown_institution(key))
        return config
