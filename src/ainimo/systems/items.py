"""
Item catalog and inventory reducers.

Items are cosmetic: a hat, an accessory and a background can be equipped
at once. They arrive as mini-game drops or are bought with coins.
"""

from __future__ import annotations

import random

from ..clock import resolve
from ..state.schema import FrozenModel, Inventory, ItemCategory, ItemRarity, OwnedItem


RARITY_DROP_WEIGHTS: dict[ItemRarity, int] = {
    ItemRarity.COMMON: 60,
    ItemRarity.RARE: 25,
    ItemRarity.EPIC: 12,
    ItemRarity.LEGENDARY: 3,
}

RARITY_PRICES: dict[ItemRarity, int] = {
    ItemRarity.COMMON: 50,
    ItemRarity.RARE: 150,
    ItemRarity.EPIC: 400,
    ItemRarity.LEGENDARY: 1000,
}


class ItemDefinition(FrozenModel):
    id: str
    name: str
    category: ItemCategory
    rarity: ItemRarity
    droppable: bool = True

    @property
    def drop_weight(self) -> int:
        return RARITY_DROP_WEIGHTS[self.rarity]

    @property
    def price(self) -> int:
        return RARITY_PRICES[self.rarity]


def _item(item_id: str, name: str, category: ItemCategory, rarity: ItemRarity) -> ItemDefinition:
    return ItemDefinition(id=item_id, name=name, category=category, rarity=rarity)


ITEMS: tuple[ItemDefinition, ...] = (
    _item("hat_ribbon", "Ribbon", ItemCategory.HAT, ItemRarity.COMMON),
    _item("hat_cap", "Baseball Cap", ItemCategory.HAT, ItemRarity.COMMON),
    _item("hat_beret", "Beret", ItemCategory.HAT, ItemRarity.RARE),
    _item("hat_flower_crown", "Flower Crown", ItemCategory.HAT, ItemRarity.RARE),
    _item("hat_wizard", "Wizard Hat", ItemCategory.HAT, ItemRarity.EPIC),
    _item("hat_crown", "Golden Crown", ItemCategory.HAT, ItemRarity.LEGENDARY),
    _item("acc_glasses", "Round Glasses", ItemCategory.ACCESSORY, ItemRarity.COMMON),
    _item("acc_scarf", "Cozy Scarf", ItemCategory.ACCESSORY, ItemRarity.COMMON),
    _item("acc_bowtie", "Bow Tie", ItemCategory.ACCESSORY, ItemRarity.RARE),
    _item("acc_headphones", "Headphones", ItemCategory.ACCESSORY, ItemRarity.RARE),
    _item("acc_monocle", "Monocle", ItemCategory.ACCESSORY, ItemRarity.EPIC),
    _item("acc_wings", "Angel Wings", ItemCategory.ACCESSORY, ItemRarity.LEGENDARY),
    _item("bg_meadow", "Sunny Meadow", ItemCategory.BACKGROUND, ItemRarity.COMMON),
    _item("bg_beach", "Beach", ItemCategory.BACKGROUND, ItemRarity.COMMON),
    _item("bg_library", "Old Library", ItemCategory.BACKGROUND, ItemRarity.RARE),
    _item("bg_city_night", "City at Night", ItemCategory.BACKGROUND, ItemRarity.RARE),
    _item("bg_space", "Outer Space", ItemCategory.BACKGROUND, ItemRarity.EPIC),
    _item("bg_rainbow", "Rainbow Sky", ItemCategory.BACKGROUND, ItemRarity.LEGENDARY),
)

_BY_ID: dict[str, ItemDefinition] = {item.id: item for item in ITEMS}


def get_item(item_id: str) -> ItemDefinition | None:
    return _BY_ID.get(item_id)


def droppable_items() -> list[ItemDefinition]:
    return [item for item in ITEMS if item.droppable]


def choose_weighted_item(
    items: list[ItemDefinition],
    rng: random.Random | None = None,
) -> ItemDefinition | None:
    """Pick one item with probability proportional to its drop weight."""
    if not items:
        return None
    rng = rng or random.Random()
    total = sum(item.drop_weight for item in items)
    roll = rng.random() * total
    for item in items:
        roll -= item.drop_weight
        if roll < 0:
            return item
    return items[-1]


# ─── Inventory reducers ─────────────────────────────────────

def has_item(inventory: Inventory, item_id: str) -> bool:
    return any(owned.item_id == item_id for owned in inventory.items)


def add_item(inventory: Inventory, item_id: str, now: int | None = None) -> Inventory:
    """Add an owned item. Unknown ids leave the inventory unchanged."""
    if get_item(item_id) is None:
        return inventory
    owned = OwnedItem(item_id=item_id, acquired_at=resolve(now))
    return inventory.model_copy(update={"items": inventory.items + (owned,)})


def add_coins(inventory: Inventory, amount: int) -> Inventory:
    if amount <= 0:
        return inventory
    return inventory.model_copy(update={"coins": inventory.coins + amount})


def spend_coins(inventory: Inventory, amount: int) -> Inventory | None:
    """Deduct coins, or None when the balance is short."""
    if amount < 0 or inventory.coins < amount:
        return None
    return inventory.model_copy(update={"coins": inventory.coins - amount})


def buy_item(inventory: Inventory, item_id: str, now: int | None = None) -> Inventory | None:
    """Buy at the rarity price. None for unknown ids or a short balance."""
    item = get_item(item_id)
    if item is None:
        return None
    paid = spend_coins(inventory, item.price)
    if paid is None:
        return None
    return add_item(paid, item_id, now)


def equip_item(inventory: Inventory, item_id: str) -> Inventory | None:
    """Equip an owned item in its category slot. None if not owned."""
    item = get_item(item_id)
    if item is None or not has_item(inventory, item_id):
        return None
    equipped = inventory.equipped.model_copy(update={item.category.value: item_id})
    return inventory.model_copy(update={"equipped": equipped})


def unequip_item(inventory: Inventory, category: ItemCategory) -> Inventory:
    if getattr(inventory.equipped, category.value) is None:
        return inventory
    equipped = inventory.equipped.model_copy(update={category.value: None})
    return inventory.model_copy(update={"equipped": equipped})
