"""Integer math for the constant-product pool."""

from spaceswap.math.constant_product import ConstantProduct, constant_product

__all__ = ["ConstantProduct", "constant_product"]
