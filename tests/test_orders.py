import pytest

from hotcoffee.inventory import InventoryService
from hotcoffee.menu import MenuService
from hotcoffee.models import (
    CreateOrderRequest,
    InventoryItem,
    MenuItem,
    MenuItemIngredient,
    NotFoundError,
    Order,
    OrderItem,
    ValidationError,
)
from hotcoffee.orders import OrderService, generate_order_id
from hotcoffee.storage import (
    inventory_repository,
    menu_repository,
    order_repository,
    prepare_data_dir,
)


@pytest.fixture
def shop(tmp_path):
    prepare_data_dir(tmp_path)
    menu = MenuService(menu_repository(tmp_path / "menu.json"))
    inventory = InventoryService(inventory_repository(tmp_path / "inventory.json"))
    inventory.add(InventoryItem("milk", "Milk", 10.0, "l"))
    inventory.add(InventoryItem("beans", "Beans", 10.0, "g"))
    menu.add(
        MenuItem(
            "latte",
            "Latte",
            "Milky",
            3.5,
            [MenuItemIngredient("milk", 2.0), MenuItemIngredient("beans", 1.0)],
        )
    )
    menu.add(MenuItem("foam", "Foam", "", 1.25, [MenuItemIngredient("milk", 1.5)]))
    prices = {}
    service = OrderService(
        order_repository(tmp_path / "orders.json"), menu, inventory, prices
    )
    return service, inventory, prices


def _request(product="latte", quantity=1, name="Alice"):
    return CreateOrderRequest(name, [OrderItem(product, quantity)])


def test_add_creates_open_order(shop):
    service, _, _ = shop
    order = service.add(_request(quantity=2))
    stored = service.get(order.order_id)
    assert stored == order
    assert stored.status == "open"
    assert stored.customer_name == "Alice"
    assert stored.items == [OrderItem("latte", 2)]
    assert stored.order_id.isdigit()
    assert stored.created_at


def test_add_requires_customer_name(shop):
    service, _, _ = shop
    with pytest.raises(ValidationError, match="invalid order data"):
        service.add(_request(name=""))
    assert service.get_all() == []


def test_add_rejects_non_positive_quantity(shop):
    service, _, _ = shop
    with pytest.raises(ValidationError):
        service.add(_request(quantity=0))


def test_add_rejects_unknown_product(shop):
    service, _, _ = shop
    with pytest.raises(NotFoundError, match="product with ID mocha not found in menu"):
        service.add(_request(product="mocha"))


def test_add_rejects_insufficient_stock(shop):
    service, _, _ = shop
    with pytest.raises(ValidationError, match="not enough stock for ingredient milk"):
        service.add(_request(quantity=6))


def test_add_does_not_touch_inventory(shop):
    service, inventory, _ = shop
    before = inventory.get_all()
    service.add(_request(quantity=3))
    assert inventory.get_all() == before


def test_get_missing_order(shop):
    service, _, _ = shop
    with pytest.raises(NotFoundError):
        service.get("missing")


def test_update_replaces_order(shop):
    service, _, _ = shop
    order = service.add(_request())
    changed = Order(order.order_id, "Bob", [OrderItem("foam", 1)], "open", order.created_at)
    service.update(order.order_id, changed)
    assert service.get(order.order_id) == changed


def test_update_missing_order(shop):
    service, _, _ = shop
    with pytest.raises(NotFoundError):
        service.update("missing", Order(order_id="missing"))


def test_delete_removes_order(shop):
    service, _, _ = shop
    first = service.add(_request())
    second = service.add(_request(name="Bob"))
    service.delete(first.order_id)
    assert [o.order_id for o in service.get_all()] == [second.order_id]
    with pytest.raises(NotFoundError):
        service.delete(first.order_id)


def test_close_deducts_inventory_and_records_price(shop):
    service, inventory, prices = shop
    order = service.add(_request(quantity=3))
    service.close(order.order_id)
    assert service.get(order.order_id).status == "closed"
    assert inventory.get("milk").quantity == 4.0
    assert inventory.get("beans").quantity == 7.0
    assert prices == {"latte": 3.5}


def test_close_truncates_remaining_quantity(shop):
    service, inventory, _ = shop
    order = service.add(_request(product="foam"))
    service.close(order.order_id)
    assert inventory.get("milk").quantity == 8.0


def test_close_twice_fails(shop):
    service, _, _ = shop
    order = service.add(_request())
    service.close(order.order_id)
    with pytest.raises(ValidationError, match="already closed"):
        service.close(order.order_id)


def test_close_missing_order(shop):
    service, _, _ = shop
    with pytest.raises(NotFoundError):
        service.close("missing")


def test_close_without_stock_keeps_order_open(shop):
    service, inventory, _ = shop
    order = service.add(_request(quantity=5))
    inventory.update("milk", inventory.get("milk"), 1)
    with pytest.raises(ValidationError):
        service.close(order.order_id)
    assert service.get(order.order_id).status == "open"


def test_generated_ids_are_numeric_and_increasing():
    first = generate_order_id()
    second = generate_order_id()
    assert first.isdigit() and second.isdigit()
    assert int(second) >= int(first)