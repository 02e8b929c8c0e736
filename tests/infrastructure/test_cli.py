"""End-to-end tests of the click CLI against JSON files in a temp directory."""

import json

import pytest
from click.testing import CliRunner

from storefront.infrastructure.cli.main import cli


@pytest.fixture
def invoke(tmp_path, monkeypatch):
    # Keep the global structlog configuration untouched for other tests.
    monkeypatch.setattr(
        "storefront.infrastructure.cli.main.configure_logging", lambda *args, **kwargs: None
    )
    runner = CliRunner()
    env = {"STOREFRONT_DATA_DIR": str(tmp_path)}

    def _invoke(*args: str):
        return runner.invoke(cli, list(args), env=env)

    return _invoke


def _stored(tmp_path, name):
    return json.loads((tmp_path / name).read_text(encoding="utf-8"))


def _add_kettle(invoke, stock="5"):
    result = invoke(
        "product", "add", "--name", "Kettle", "--price", "3000",
        "--stock", stock, "--category", "home",
    )
    assert result.exit_code == 0, result.output
    return result


# ── Products ─────────────────────────────────────────────────────────────────


class TestProductCommands:

    def test_add_and_list(self, invoke):
        added = _add_kettle(invoke)
        assert "Product #1 'Kettle' added at ¥3,000 (stock 5)" in added.output

        listed = invoke("product", "list")
        assert listed.exit_code == 0
        assert "Kettle" in listed.output

    def test_unknown_category_rejected_by_cli(self, invoke):
        result = invoke(
            "product", "add", "--name", "Toy", "--price", "100", "--category", "toys"
        )
        assert result.exit_code == 2

    def test_deactivate_hides_from_list(self, invoke):
        _add_kettle(invoke)
        result = invoke("product", "deactivate", "--id", "1")

        assert "Product deactivated: #1 'Kettle'" in result.output
        assert "No products found." in invoke("product", "list").output

    def test_unknown_product_is_an_error(self, invoke):
        result = invoke("product", "price", "--id", "9", "--set", "500")
        assert result.exit_code == 1
        assert "Product not found" in result.output


# ── Cart and checkout ────────────────────────────────────────────────────────


class TestCheckoutFlow:

    def test_cart_to_order(self, invoke, tmp_path):
        _add_kettle(invoke, stock="5")
        added = invoke("cart", "add", "--user", "1", "--product", "1", "--qty", "2")
        assert "Product added to cart" in added.output
        assert "¥6,000" in added.output

        checkout = invoke(
            "order", "checkout", "--user", "1", "--postal-code", "150-0001",
            "--prefecture", "Tokyo", "--city", "Shibuya", "--address1", "1-2-3",
        )

        assert checkout.exit_code == 0, checkout.output
        assert "Order #1 created  (status=pending)" in checkout.output
        assert _stored(tmp_path, "products.json")[0]["stock"] == 3
        assert "Cart is empty." in invoke("cart", "show", "--user", "1").output

    def test_checkout_with_empty_cart(self, invoke, tmp_path):
        result = invoke(
            "order", "checkout", "--user", "1", "--postal-code", "150-0001",
            "--prefecture", "Tokyo", "--city", "Shibuya", "--address1", "1-2-3",
        )
        assert result.exit_code == 1
        assert "Cart is empty" in result.output
        assert _stored(tmp_path, "orders.json") == []

    def test_adding_beyond_stock(self, invoke):
        _add_kettle(invoke, stock="1")
        result = invoke("cart", "add", "--user", "1", "--product", "1", "--qty", "2")
        assert result.exit_code == 1
        assert "Insufficient stock" in result.output

    def test_other_users_order_is_not_visible(self, invoke):
        _add_kettle(invoke)
        invoke("cart", "add", "--user", "1", "--product", "1")
        invoke(
            "order", "checkout", "--user", "1", "--postal-code", "150-0001",
            "--prefecture", "Tokyo", "--city", "Shibuya", "--address1", "1-2-3",
        )

        assert "Order #1" in invoke("order", "show", "--user", "1", "--id", "1").output
        hidden = invoke("order", "show", "--user", "2", "--id", "1")
        assert hidden.exit_code == 1
        assert "Order not found" in hidden.output


# ── Users ────────────────────────────────────────────────────────────────────


class TestUserCommands:

    def test_register_and_promote(self, invoke):
        admin = invoke(
            "user", "add", "--email", "boss@example.com",
            "--first-name", "Aiko", "--last-name", "Mori", "--admin",
        )
        assert "registered as administrator" in admin.output
        invoke("user", "add", "--email", "c@example.com", "--first-name", "Ken", "--last-name", "Ito")

        result = invoke("user", "promote", "--actor", "1", "--id", "2")
        assert "User #2 is now an administrator" in result.output

    def test_duplicate_email(self, invoke):
        args = ("user", "add", "--email", "c@example.com", "--first-name", "Ken", "--last-name", "Ito")
        invoke(*args)
        result = invoke(*args)
        assert result.exit_code == 1
        assert "Email address is already registered" in result.output
