"""Tests for loading and resolving institution maps."""

import json
import logging
import pytest
from decimal import Decimal

from finimport.domain.errors import ConfigError
from finimport.domain.institution_maps import InstitutionMapRegistry, parse_institution_config


def _entry(**overrides):
    entry = {
        "dateFormat": "MM/dd/yyyy",
        "Date": "Date",
        "Amount": "Amount",
        "Payee": "Payee",
        "account": {"name": "Visa", "type": "credit"},
    }
    entry.update(overrides)
    return entry


class TestParseInstitutionConfig:
    """Tests for parsing a single institution entry."""

    def test_full_entry(self):
        """Test that every binding ends up in the typed config."""
        config = parse_institution_config(
            "visa",
            _entry(
                BankCategory="Category",
                category_mappings=[{"bank_cat": "Dining", "internal_cat": "Dining"}],
                rules=[{"match": "amazon", "category": "Shopping"}],
            ),
        )

        assert config.key == "visa"
        assert config.date_column == "Date"
        assert config.amount_column == "Amount"
        assert config.payee_column == "Payee"
        assert config.bank_category_column == "Category"
        assert config.date_format == "MM/dd/yyyy"
        assert config.account.name == "Visa"
        assert config.account.type == "credit"
        assert config.account.initial_balance == Decimal("0")
        assert config.category_mappings[0].bank_cat == "Dining"
        assert len(config.rules) == 1
        assert config.rules[0].category == "Shopping"

    def test_missing_required_column(self):
        """Test that an entry without a Payee binding is rejected."""
        entry = _entry()
        del entry["Payee"]
        with pytest.raises(ConfigError, match="Payee"):
            parse_institution_config("visa", entry)

    def test_missing_account(self):
        """Test that an entry without an account block is rejected."""
        entry = _entry()
        del entry["account"]
        with pytest.raises(ConfigError, match="account"):
            parse_institution_config("visa", entry)

    def test_account_defaults(self):
        """Test account type and balance defaults."""
        config = parse_institution_config("visa", _entry(account={"name": "Visa"}))
        assert config.account.type == "checking"
        assert config.account.initial_balance == Decimal("0")

    def test_invalid_initial_balance(self):
        """Test that a non-numeric initial balance is rejected."""
        with pytest.raises(ConfigError, match="initial_balance"):
            parse_institution_config("visa", _entry(account={"name": "Visa", "initial_balance": "lots"}))

    def test_date_format_optional(self):
        """Test that dateFormat may be omitted."""
        entry = _entry()
        del entry["dateFormat"]
        config = parse_institution_config("visa", entry)
        assert config.date_format is None

    def test_malformed_mapping(self):
        """Test that a mapping without internal_cat is rejected."""
        with pytest.raises(ConfigError):
            parse_institution_config("visa", _entry(category_mappings=[{"bank_cat": "Dining"}]))

    def test_rules_must_be_list(self):
        """Test that rules given as an object are rejected."""
        with pytest.raises(ConfigError, match="rules"):
            parse_institution_config("visa", _entry(rules={"match": "amazon"}))


class TestInstitutionMapRegistry:
    """Tests for the registry built from the maps file."""

    def test_load_fixture(self, registry):
        """Test loading the sample maps file."""
        assert registry.keys() == ["broken_rules", "checking", "no_account", "visa"]
        assert "visa" in registry
        assert "amex" not in registry

        visa = registry.get("visa")
        assert visa.account.name == "Visa"
        assert len(visa.rules) == 2

        checking = registry.get("checking")
        assert checking.date_column == "Posting Date"
        assert checking.account.initial_balance == Decimal("1500")

    def test_unknown_key(self, registry):
        """Test that an unknown key raises a ConfigError naming it."""
        with pytest.raises(ConfigError, match="Unknown institution key 'amex'"):
            registry.get("amex")

    def test_invalid_entry_fails_only_on_use(self, registry):
        """Test that a misconfigured entry does not prevent loading the others."""
        with pytest.raises(ConfigError, match="misconfigured"):
            registry.get("no_account")
        assert registry.get("checking") is not None

    def test_invalid_regex_dropped_with_warning(self, maps_path, caplog):
        """Test that an uncompilable rule is dropped and later rules survive."""
        with caplog.at_level(logging.WARNING):
            registry = InstitutionMapRegistry.load(maps_path)

        rules = registry.get("broken_rules").rules
        assert len(rules) == 1
        assert rules[0].category == "Utilities"
        assert "(unclosed" in caplog.text

    def test_missing_file(self, tmp_path):
        """Test that a missing maps file raises ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            InstitutionMapRegistry.load(tmp_path / "missing.json")

    def test_malformed_json(self, tmp_path):
        """Test that invalid JSON raises ConfigError."""
        path = tmp_path / "maps.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Could not parse"):
            InstitutionMapRegistry.load(path)

    def test_top_level_must_be_object(self, tmp_path):
        """Test that a JSON list at the top level is rejected."""
        path = tmp_path / "maps.json"
        path.write_text(json.dumps([_entry()]), encoding="utf-8")
        with pytest.raises(ConfigError):
            InstitutionMapRegistry.load(path)

    def test_from_dict(self):
        """Test building a registry from decoded data."""
        registry = InstitutionMapRegistry.from_dict({"visa": _entry()})
        assert registry.keys() == ["visa"]
        assert registry.get("visa").payee_column == "Payee"
