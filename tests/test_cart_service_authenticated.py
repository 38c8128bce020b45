import pytest

from artisan_cart.domain.errors import RemoteCallError
from artisan_cart.services.cart_service import CartService, CartState
from conftest import make_product


class TestAuthenticatedCart:
    def test_initial_state_has_empty_cache_until_refresh(self, auth_service, client):
        client.seed(7, 2)

        assert auth_service.state is CartState.AUTHENTICATED
        assert auth_service.items == []
        assert client.calls == []

        auth_service.refresh_cart()

        assert [(i.product_id, i.quantity) for i in auth_service.items] == [(7, 2)]

    def test_add_sends_clamped_delta_then_reloads(self, auth_service, client):
        client.seed(7, 2, available=4)
        auth_service.refresh_cart()
        client.calls.clear()

        auth_service.add_to_cart(make_product(7, available=4), 3)

        assert client.calls == [("add", 7, 2), ("fetch_cart",)]
        assert auth_service.items[0].quantity == 4

    def test_add_at_ceiling_makes_no_remote_call(self, auth_service, client):
        client.seed(7, 4, available=4)
        auth_service.refresh_cart()
        client.calls.clear()

        auth_service.add_to_cart(make_product(7, available=4), 1)

        assert client.calls == []

    def test_add_lowers_row_when_stock_dropped_below_cart_quantity(self, auth_service, client):
        client.seed(7, 5, available=10)
        auth_service.refresh_cart()
        client.calls.clear()

        auth_service.add_to_cart(make_product(7, available=3), 1)

        assert client.calls == [("update", 7, 3), ("fetch_cart",)]
        assert auth_service.items[0].quantity == 3

    def test_add_new_product(self, auth_service, client):
        auth_service.add_to_cart(make_product(5, available=3), 5)

        assert client.calls == [("add", 5, 3), ("fetch_cart",)]
        assert auth_service.items[0].id == 1000
        assert auth_service.total_items == 3

    def test_update_quantity_is_clamped_before_sending(self, auth_service, client):
        client.seed(7, 1, available=3)
        auth_service.refresh_cart()
        client.calls.clear()

        auth_service.update_quantity(7, 9)

        assert client.calls == [("update", 7, 3), ("fetch_cart",)]

    def test_update_quantity_zero_removes(self, auth_service, client):
        client.seed(7, 1)
        auth_service.refresh_cart()
        client.calls.clear()

        auth_service.update_quantity(7, 0)

        assert client.calls == [("remove", 7), ("fetch_cart",)]
        assert auth_service.items == []

    def test_remove_absent_product_is_noop_without_remote_call(self, auth_service, client):
        auth_service.remove_from_cart(42)

        assert client.calls == []
        assert auth_service.items == []

    def test_clear_cart_issues_remote_clear(self, auth_service, client, store):
        client.seed(7, 2)
        auth_service.refresh_cart()
        client.calls.clear()

        auth_service.clear_cart()

        assert client.call_names() == ["clear", "fetch_cart"]
        assert auth_service.items == []
        assert store.get("cart_item_count") == "0"
        assert store.get("guest_cart") is None

    def test_does_not_touch_guest_slot(self, auth_service, store):
        auth_service.add_to_cart(make_product(7), 1)

        assert store.get("guest_cart") is None
        assert store.get("cart_item_count") == "1"

    @pytest.mark.parametrize("operation", ["add", "update", "remove"])
    def test_remote_failure_propagates_and_leaves_state_unchanged(self, auth_service, client, operation):
        client.seed(7, 2)
        auth_service.refresh_cart()
        before = auth_service.items
        client.fail_on.add(operation)
        counts = []
        auth_service.subscribe(lambda update: counts.append(update.count))

        with pytest.raises(RemoteCallError):
            if operation == "add":
                auth_service.add_to_cart(make_product(7), 1)
            elif operation == "update":
                auth_service.update_quantity(7, 5)
            else:
                auth_service.remove_from_cart(7)

        assert auth_service.items == before
        assert counts == []
        assert auth_service.is_loading is False

    def test_failed_refresh_keeps_previous_cache(self, auth_service, client):
        client.seed(7, 2)
        auth_service.refresh_cart()
        client.fail_on.add("fetch_cart")

        with pytest.raises(RemoteCallError):
            auth_service.refresh_cart()

        assert auth_service.total_items == 2

    def test_badge_follows_server_count(self, auth_service, client):
        counts = []
        auth_service.subscribe(lambda update: counts.append(update.count))

        auth_service.add_to_cart(make_product(7), 2)
        auth_service.add_to_cart(make_product(8), 1)

        assert counts == [2, 3]

    def test_logout_signal_does_not_return_to_guest(self, auth_service, client):
        auth_service.set_authenticated(False)

        auth_service.add_to_cart(make_product(7), 1)

        assert auth_service.state is CartState.AUTHENTICATED
        assert client.call_names() == ["add", "fetch_cart"]


def test_last_known_item_count_survives_reload(repo, client):
    client.seed(7, 3)
    first = CartService(repo, client, is_authenticated=True)
    first.refresh_cart()

    reloaded = CartService(repo, client, is_authenticated=True)

    assert reloaded.items == []
    assert reloaded.last_known_item_count == 3
