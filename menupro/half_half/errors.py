"""
Exceptions raised by the half-and-half resolver.

Every HalfHalfError carries a customer-facing message (Portuguese, as shown
on the digital menu). Routes return it as the detail of a 422 response.
"""


class HalfHalfError(Exception):
    """Base class for half-and-half validation failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class HalfHalfDisabledError(HalfHalfError):
    """Raised when the company or category does not offer half-and-half."""

    def __init__(self, category_id: str | None = None):
        self.category_id = category_id
        super().__init__("Pizza meio a meio não está disponível para esta categoria")


class FlavorCountError(HalfHalfError):
    """Raised when checkout is attempted without exactly max_flavors flavors."""

    def __init__(self, selected: int, required: int):
        self.selected = selected
        self.required = required
        if selected == 0:
            message = "Selecione pelo menos um sabor"
        else:
            message = f"Selecione {required} sabores para montar a pizza"
        super().__init__(message)


class MaxFlavorsReachedError(HalfHalfError):
    """Raised when one flavor too many is picked."""

    def __init__(self, max_flavors: int):
        self.max_flavors = max_flavors
        super().__init__(f"Você pode selecionar no máximo {max_flavors} sabores")


class UnknownFlavorError(HalfHalfError):
    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Sabor não encontrado: {product_id}")


class InvalidSelectionError(HalfHalfError):
    """Raised for a size, group or option that is not on offer."""


class MissingRequiredOptionError(HalfHalfError):
    def __init__(self, group_name: str):
        self.group_name = group_name
        super().__init__(f"Escolha uma opção em {group_name}")


class BuilderClosedError(HalfHalfError):
    def __init__(self):
        super().__init__("A montagem da pizza foi encerrada")


class LoadCancelledError(Exception):
    """Raised inside a loader when its builder was closed mid-load."""


class PricingError(ValueError):
    """Raised for inputs the pricing functions cannot price."""
