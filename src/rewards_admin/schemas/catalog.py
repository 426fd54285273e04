from .common import (
    Checkbox,
    FormSchema,
    NonNegativeInt,
    OptionalDateTime,
    OptionalText,
    required_ref,
    required_text,
)


class CategoryInput(FormSchema):
    name: required_text("Name is required") = ""
    description: OptionalText = None
    active: Checkbox = False


class SubcategoryInput(FormSchema):
    category_id: required_ref("Category is required") = None
    name: required_text("Name is required") = ""
    description: OptionalText = None
    active: Checkbox = False


class ProductInput(FormSchema):
    subcategory_id: required_ref("Subcategory is required") = None
    name: required_text("Name is required") = ""
    description: OptionalText = None
    required_points: NonNegativeInt = 0
    active: Checkbox = False
    creation_date: OptionalDateTime = None


class StockInput(FormSchema):
    branch_id: required_ref("Branch is required") = None
    product_id: required_ref("Product is required") = None
    quantity: NonNegativeInt = 0
    minimum_quantity: NonNegativeInt = 0
    last_updated: OptionalDateTime = None
