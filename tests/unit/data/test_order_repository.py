"""
Tests for SqlAlchemyOrderRepository and UnitOfWork.

Runs against in-memory SQLite with foreign keys enabled.
"""
from decimal import Decimal

import pytest
from sqlalchemy import delete, select

from order_manager.data.models.order_model import OrderItemModel, OrderModel
from order_manager.data.uow import create_uow
from order_manager.domain.entities.order import Order, OrderItem
from order_manager.domain.exceptions import StoreError
from order_manager.domain.value_objects import OrderStatus, utcnow


def build_order(customer_name: str = "John Doe", *items, status=None) -> Order:
    order = Order.new(customer_name=customer_name, status=status)
    for name, quantity, price in items:
        order.add_item(OrderItem.new(name, quantity, Decimal(price)))
    return order


async def save_order(session_factory, order: Order) -> Order:
    async with create_uow(session_factory) as uow:
        await uow.orders.save(order)
        await uow.commit()
    return order


@pytest.mark.asyncio
async def test_save_new_order_assigns_ids_and_links_items(test_session_factory):
    """Inserting an order writes its items with the new order id."""
    order = build_order("John Doe", ("Laptop", 1, "999.99"), ("Mouse", 2, "29.99"))

    await save_order(test_session_factory, order)

    assert order.id is not None
    assert all(item.id is not None for item in order.items)
    assert all(item.order_id == order.id for item in order.items)

    async with create_uow(test_session_factory) as uow:
        loaded = await uow.orders.find_by_id_with_items(order.id)

    assert loaded.customer_name == "John Doe"
    assert [item.product_name for item in loaded.items] == ["Laptop", "Mouse"]
    assert loaded.items[0].unit_price == Decimal("999.99")
    assert {item.order_id for item in loaded.items} == {order.id}


@pytest.mark.asyncio
async def test_find_by_id_with_items_returns_none_when_missing(test_session_factory):
    async with create_uow(test_session_factory) as uow:
        assert await uow.orders.find_by_id_with_items(999) is None


@pytest.mark.asyncio
async def test_empty_order_loads_with_empty_collection(test_session_factory):
    order = await save_order(test_session_factory, build_order("Nobody"))

    async with create_uow(test_session_factory) as uow:
        loaded = await uow.orders.find_by_id_with_items(order.id)

    assert loaded.items == ()


@pytest.mark.asyncio
async def test_find_all_with_items_is_a_single_query(test_session_factory, executed_statements):
    """Loading N orders never issues one query per order."""
    await save_order(test_session_factory, build_order("A", ("Laptop", 1, "999.99")))

    executed_statements.clear()
    async with create_uow(test_session_factory) as uow:
        orders = await uow.orders.find_all_with_items()
    queries_for_one = len(executed_statements)
    assert len(orders) == 1

    for i in range(10):
        await save_order(
            test_session_factory,
            build_order(f"Customer {i}", ("Pen", 1, "1.50"), ("Paper", 3, "4.00")),
        )

    executed_statements.clear()
    async with create_uow(test_session_factory) as uow:
        orders = await uow.orders.find_all_with_items()

    assert len(orders) == 11
    assert sum(len(order.items) for order in orders) == 21
    assert len(executed_statements) == queries_for_one == 1


@pytest.mark.asyncio
async def test_find_all_with_items_filters_by_status(test_session_factory):
    await save_order(test_session_factory, build_order("A", status=OrderStatus.SHIPPED))
    await save_order(test_session_factory, build_order("B"))

    async with create_uow(test_session_factory) as uow:
        shipped = await uow.orders.find_all_with_items(status=OrderStatus.SHIPPED)

    assert [order.customer_name for order in shipped] == ["A"]


@pytest.mark.asyncio
async def test_save_diffs_items(test_session_factory):
    """Save inserts new items, updates changed ones and deletes removed ones."""
    order = await save_order(
        test_session_factory,
        build_order("John Doe", ("Laptop", 1, "999.99"), ("Mouse", 2, "29.99")),
    )
    laptop_id, mouse_id = (item.id for item in order.items)

    async with create_uow(test_session_factory) as uow:
        loaded = await uow.orders.find_by_id_with_items(order.id)
        loaded.remove_item(laptop_id)
        loaded.update_item(mouse_id, quantity=5)
        loaded.add_item(OrderItem.new("Keyboard", 1, Decimal("49.00")))
        await uow.orders.save(loaded)
        await uow.commit()

    async with create_uow(test_session_factory) as uow:
        reloaded = await uow.orders.find_by_id_with_items(order.id)
        orphan = await uow.orders.find_item_by_id(laptop_id)

    assert [(item.product_name, item.quantity) for item in reloaded.items] == [
        ("Mouse", 5),
        ("Keyboard", 1),
    ]
    assert orphan is None
    assert loaded.removed_item_ids == ()


@pytest.mark.asyncio
async def test_delete_removes_order_and_items(test_session_factory):
    order = await save_order(
        test_session_factory,
        build_order("John Doe", ("Laptop", 1, "999.99"), ("Mouse", 2, "29.99")),
    )
    item_ids = [item.id for item in order.items]

    async with create_uow(test_session_factory) as uow:
        await uow.orders.delete(order)
        await uow.commit()

    async with create_uow(test_session_factory) as uow:
        assert await uow.orders.find_by_id_with_items(order.id) is None
        for item_id in item_ids:
            assert await uow.orders.find_item_by_id(item_id) is None

    async with test_session_factory() as session:
        rows = await session.execute(
            select(OrderItemModel).where(OrderItemModel.order_id == order.id)
        )
        assert rows.scalars().all() == []


@pytest.mark.asyncio
async def test_schema_cascades_item_rows(test_session):
    """The foreign key itself removes items when an order row goes away."""
    now = utcnow()
    order = OrderModel(
        customer_name="John Doe",
        order_date=now,
        status="PENDING",
        created_at=now,
        updated_at=now,
    )
    test_session.add(order)
    await test_session.flush()
    test_session.add(
        OrderItemModel(
            order_id=order.id,
            product_name="Laptop",
            quantity=1,
            unit_price=Decimal("999.99"),
            created_at=order.created_at,
            updated_at=order.created_at,
        )
    )
    await test_session.commit()

    await test_session.execute(delete(OrderModel).where(OrderModel.id == order.id))
    await test_session.commit()

    remaining = await test_session.execute(select(OrderItemModel))
    assert remaining.scalars().all() == []


@pytest.mark.asyncio
async def test_search_items_by_product_name(test_session_factory):
    await save_order(
        test_session_factory,
        build_order("A", ("Gaming Laptop", 1, "1500.00"), ("Mouse", 1, "20.00")),
    )
    await save_order(test_session_factory, build_order("B", ("laptop sleeve", 1, "15.00")))

    async with create_uow(test_session_factory) as uow:
        found = await uow.orders.search_items_by_product_name("LAPTOP")
        none_found = await uow.orders.search_items_by_product_name("100%")

    assert [item.product_name for item in found] == ["Gaming Laptop", "laptop sleeve"]
    assert none_found == []


@pytest.mark.asyncio
async def test_uncommitted_work_is_rolled_back(test_session_factory):
    """Leaving the unit of work with an error discards everything."""
    with pytest.raises(RuntimeError):
        async with create_uow(test_session_factory) as uow:
            await uow.orders.save(build_order("Ghost", ("Laptop", 1, "999.99")))
            raise RuntimeError("request aborted")

    async with create_uow(test_session_factory) as uow:
        assert await uow.orders.find_all_with_items() == []


@pytest.mark.asyncio
async def test_store_failures_become_store_error(test_session_factory):
    """A constraint violation surfaces as StoreError and nothing is kept."""
    with pytest.raises(StoreError):
        async with create_uow(test_session_factory) as uow:
            # Item pointing at a non-existent order violates the foreign key
            uow._session.add(
                OrderItemModel(
                    order_id=12345,
                    product_name="Orphan",
                    quantity=1,
                    unit_price=Decimal("1.00"),
                    created_at=utcnow(),
                    updated_at=utcnow(),
                )
            )
            await uow.commit()

    async with create_uow(test_session_factory) as uow:
        assert await uow.orders.search_items_by_product_name("Orphan") == []


@pytest.mark.asyncio
async def test_unit_of_work_requires_context_manager(test_session_factory):
    uow = create_uow(test_session_factory)

    with pytest.raises(RuntimeError):
        uow.orders
    with pytest.raises(RuntimeError):
        await uow.commit()
