"""
Cart used by the counter, the waiter screen and offline replays.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List

from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from apps.inventory.models import Product
from apps.inventory.services.stock_service import StockServiceError


@dataclass
class CartLine:
    product_id: str
    name: str
    price: int
    quantity: int
    is_formula: bool = False

    @property
    def subtotal(self) -> int:
        return self.price * self.quantity

    def as_item(self) -> Dict[str, Any]:
        return {
            'product_id': self.product_id,
            'name': self.name,
            'price': self.price,
            'quantity': self.quantity,
            'is_formula': self.is_formula,
        }


@dataclass
class Cart:
    """
    Lines keyed by (product, formula flag).
    The units of one product across its lines never exceed its stock.
    """
    lines: List[CartLine] = field(default_factory=list)

    def _find(self, product_id: str, is_formula: bool):
        for line in self.lines:
            if line.product_id == product_id and line.is_formula == is_formula:
                return line
        return None

    def units_of(self, product_id: str) -> int:
        return sum(line.quantity for line in self.lines if line.product_id == product_id)

    def add(self, product: Product, is_formula: bool = False) -> CartLine:
        """
        Add one unit, or one formula bundle, of a product.

        Raises:
            StockServiceError: when the product has no formula or stock is short
        """
        if is_formula and not product.has_formula:
            raise StockServiceError(_("This product has no formula"))

        product_id = str(product.id)
        price = product.formula_price if is_formula else product.price
        step = product.formula_units if is_formula else 1

        if self.units_of(product_id) + step > product.quantity:
            raise StockServiceError(
                _("Stock insuffisant. Stock disponible: %(stock)s unités") % {'stock': product.quantity}
            )

        line = self._find(product_id, is_formula)
        if line:
            line.quantity += step
        else:
            line = CartLine(product_id, product.name, price, step, is_formula)
            self.lines.append(line)
        return line

    def set_quantity(self, product: Product, quantity: int, is_formula: bool = False):
        """Set a line's units; zero or less removes the line."""
        product_id = str(product.id)
        line = self._find(product_id, is_formula)
        if quantity <= 0:
            if line:
                self.lines.remove(line)
            return None
        others = self.units_of(product_id) - (line.quantity if line else 0)
        if others + quantity > product.quantity:
            raise StockServiceError(
                _("Stock insuffisant. Stock disponible: %(stock)s unités") % {'stock': product.quantity}
            )
        if line is None:
            price = product.formula_price if is_formula else product.price
            line = CartLine(product_id, product.name, price, quantity, is_formula)
            self.lines.append(line)
        else:
            line.quantity = quantity
        return line

    @property
    def total(self) -> int:
        return sum(line.subtotal for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def items(self) -> List[Dict[str, Any]]:
        return [line.as_item() for line in self.lines]

    def clear(self):
        self.lines.clear()

    @classmethod
    def from_items(cls, owner, items: List[Dict[str, Any]]) -> 'Cart':
        """
        Rebuild a cart from client items, re-pricing from the product table.
        Repeated (product, formula) lines are merged by summing their quantities.
        """
        products = {}
        quantities: Dict[tuple, int] = {}
        for item in items:
            try:
                product = Product.objects.get(id=item.get('product_id'), owner=owner, is_active=True)
            except (Product.DoesNotExist, ValidationError, ValueError):
                raise StockServiceError(_("Product not found"))
            key = (str(product.id), bool(item.get('is_formula', False)))
            products[key[0]] = product
            quantities[key] = quantities.get(key, 0) + int(item.get('quantity', 0))

        cart = cls()
        for (product_id, is_formula), quantity in quantities.items():
            cart.set_quantity(products[product_id], quantity, is_formula)
        return cart
