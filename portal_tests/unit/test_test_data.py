import dataclasses

import pytest
import yaml

from portal_tests.ui_testing.framework.errors import ConfigurationError
from portal_tests.ui_testing.framework.test_data import (
    Address,
    PaymentMethod,
    Product,
    TestDataProvider,
    UserCredentials,
    build_record,
)


def write_catalogs(directory, **overrides):
    catalogs = {
        "users.yaml": {"valid": {"email": "a@example.com", "password": "pw"}},
        "products.yaml": [{"name": "Lamp", "category": "Home", "price": 10.0, "slug": "lamp"}],
        "addresses.yaml": {},
        "payments.yaml": {"cod": {"kind": "cod", "label": "Cash on Delivery"}},
        "messages.yaml": {"added_to_cart": "added"},
    }
    catalogs.update(overrides)
    for name, content in catalogs.items():
        (directory / name).write_text(yaml.dump(content), encoding="utf-8")
    return directory


def test_bundled_catalogs_load(data):
    assert data.valid_user().email
    assert data.invalid_user().email != data.valid_user().email
    assert len(data.products()) >= 2
    assert data.categories() == tuple(dict.fromkeys(p.category for p in data.products()))
    assert data.address().missing_fields() == []
    assert data.payment("card").missing_fields() == []
    assert data.payment("cod").missing_fields() == []
    assert "added_to_cart" in data.messages


def test_records_are_read_only(data):
    with pytest.raises(dataclasses.FrozenInstanceError):
        data.valid_user().email = "changed@example.com"

    with pytest.raises(TypeError):
        data.messages["login_failed"] = "changed"


def test_unknown_keys_raise_configuration_error(data):
    with pytest.raises(ConfigurationError, match="Unknown user 'admin'"):
        data.user("admin")
    with pytest.raises(ConfigurationError):
        data.message("no_such_message")
    with pytest.raises(ConfigurationError):
        data.product("Flux Capacitor")


def test_product_lookup_and_category_filter(data):
    first = data.product()
    assert data.product(first.name) == first
    assert first in data.products_in(first.category.upper())
    assert first.path == f"/product/{first.slug}"


def test_random_emails_are_distinct(data):
    emails = {data.random_email() for _ in range(200)}

    assert len(emails) == 200
    assert all(email.startswith("autotest_") and email.endswith("@example.com") for email in emails)


def test_generated_users_are_complete_and_unique(data):
    first, second = data.new_user(), data.new_user()

    assert first.email != second.email
    assert first.last_name != second.last_name
    assert len(first.password) == 12
    assert any(c.isupper() for c in first.password) and any(c.isdigit() for c in first.password)


def test_with_overrides_copies_record(data):
    address = data.address()
    moved = data.with_overrides(address, city="Chicago")

    assert moved.city == "Chicago"
    assert address.city != "Chicago"
    with pytest.raises(ConfigurationError):
        data.with_overrides(address, planet="Mars")


def test_missing_fields_report():
    address = Address("Ann", "", "ann@example.com", "", "1 Main St", "Austin", "TX", "73301", "US")
    card = PaymentMethod(kind="card", label="Credit Card", card_number="4111")

    assert address.missing_fields() == ["last_name", "phone"]
    assert card.missing_fields() == ["card_holder", "expiry", "cvv"]


def test_build_record_validation():
    assert build_record(UserCredentials, {"email": "e", "password": "p"}, "t").full_name == ""
    with pytest.raises(ConfigurationError, match="unknown keys"):
        build_record(Product, {"name": "x", "category": "y", "price": 1, "colour": "red"}, "t")
    with pytest.raises(ConfigurationError):
        build_record(Product, {"name": "x"}, "t")
    with pytest.raises(ConfigurationError, match="expected a mapping"):
        build_record(Product, ["x"], "t")


def test_load_from_custom_directory(tmp_path):
    provider = TestDataProvider.load(write_catalogs(tmp_path))

    assert provider.product().name == "Lamp"
    assert provider.payment("cod").is_card is False
    with pytest.raises(ConfigurationError):
        provider.address()


def test_load_rejects_bad_files(tmp_path):
    write_catalogs(tmp_path)
    (tmp_path / "products.yaml").write_text("- name: [unclosed", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        TestDataProvider.load(tmp_path)

    write_catalogs(tmp_path, **{"products.yaml": {"not": "a list"}})
    with pytest.raises(ConfigurationError, match="expected a list"):
        TestDataProvider.load(tmp_path)

    write_catalogs(tmp_path)
    (tmp_path / "messages.yaml").unlink()
    with pytest.raises(ConfigurationError, match="not found"):
        TestDataProvider.load(tmp_path)


ADDRESS = {
    "first_name": "Ann",
    "last_name": "Lee",
    "email": "ann@example.com",
    "phone": "5550001111",
    "street": "1 Main St",
    "city": "Austin",
    "state": "TX",
    "postal_code": "73301",
    "country": "US",
}


@pytest.mark.parametrize(
    "record_type, raw, key",
    [
        (Address, dict(ADDRESS, postal_code=62704), "postal_code"),
        (PaymentMethod, {"kind": "card", "label": "Credit Card", "cvv": 123}, "cvv"),
        (Product, {"name": "Lamp", "category": "Home", "price": "cheap"}, "price"),
        (Product, {"name": "Lamp", "category": "Home", "price": 10, "max_quantity": 2.5}, "max_quantity"),
        (Product, {"name": "Lamp", "category": "Home", "price": True}, "price"),
    ],
)
def test_build_record_rejects_wrong_value_types(record_type, raw, key):
    with pytest.raises(ConfigurationError, match=key):
        build_record(record_type, raw, "t")


def test_build_record_normalizes_numbers():
    product = build_record(Product, {"name": "Lamp", "category": "Home", "price": 10}, "t")

    assert product.price == 10.0
    assert isinstance(product.price, float)
    assert build_record(Address, ADDRESS, "t").postal_code == "73301"


def test_load_rejects_unquoted_numeric_text(tmp_path):
    write_catalogs(tmp_path, **{"addresses.yaml": {"default": dict(ADDRESS, postal_code=62704)}})

    with pytest.raises(ConfigurationError, match="addresses.yaml:default.*postal_code"):
        TestDataProvider.load(tmp_path)


def test_valid_user_uses_environment_credentials(data, monkeypatch):
    catalog = data.user("valid")
    monkeypatch.setenv("UI_USERNAME", "ci.shopper@example.com")
    monkeypatch.setenv("UI_PASSWORD", "from-ci-secret")

    user = data.valid_user()

    assert (user.email, user.password) == ("ci.shopper@example.com", "from-ci-secret")
    assert user.first_name == catalog.first_name
    assert data.user("valid") == catalog


def test_valid_user_defaults_to_catalog(data, monkeypatch):
    monkeypatch.delenv("UI_USERNAME", raising=False)
    monkeypatch.setenv("UI_PASSWORD", "")

    assert data.valid_user() == data.user("valid")
