"""Tests for product payload validation."""

import pytest

from app.core.exceptions import ValidationError
from app.schemas.products import coerce_price, parse_product_fields

CATEGORY_ID = "507f1f77bcf86cd799439011"


def payload(**overrides) -> dict:
    data = {
        "name": "Phone",
        "description": "X",
        "price": 499.99,
        "category": CATEGORY_ID,
    }
    data.update(overrides)
    return {key: value for key, value in data.items() if value is not ...}


class TestParseProductFields:
    def test_valid_json_payload(self) -> None:
        fields = parse_product_fields(payload())
        assert fields.name == "Phone"
        assert fields.price == 499.99
        assert fields.category == CATEGORY_ID
        assert fields.image_url is None

    def test_form_strings_are_coerced(self) -> None:
        """Should convert form string prices to numbers."""
        fields = parse_product_fields(payload(price=" 12.5 ", name="  Lamp "))
        assert fields.price == 12.5
        assert fields.name == "Lamp"

    def test_zero_price_is_present(self) -> None:
        assert parse_product_fields(payload(price=0)).price == 0

    def test_category_is_normalised_to_lowercase(self) -> None:
        fields = parse_product_fields(payload(category=CATEGORY_ID.upper()))
        assert fields.category == CATEGORY_ID

    def test_image_url_passed_through(self) -> None:
        fields = parse_product_fields(payload(imageURL="https://cdn.test/p.jpg"))
        assert fields.image_url == "https://cdn.test/p.jpg"

    def test_blank_image_url_means_not_supplied(self) -> None:
        assert not parse_product_fields(payload(imageURL="")).image_url

    @pytest.mark.parametrize("field", ["name", "description", "price", "category"])
    def test_missing_required_field(self, field: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse_product_fields(payload(**{field: ...}))
        assert exc_info.value.details == [f"\"{field}\" is required"]

    def test_blank_strings_count_as_missing(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse_product_fields(payload(name="   ", price=""))
        assert exc_info.value.details == ["\"name\" is required", "\"price\" is required"]

    def test_missing_fields_reported_before_bad_category(self) -> None:
        """Should report missing fields first, then category format, then price."""
        with pytest.raises(ValidationError, match="required"):
            parse_product_fields(payload(description=..., category="nope", price="abc"))

    def test_bad_category_reported_before_bad_price(self) -> None:
        with pytest.raises(ValidationError, match="Invalid category ID"):
            parse_product_fields(payload(category="nope", price="abc"))

    def test_non_numeric_price_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Price must be a number"):
            parse_product_fields(payload(price="abc"))

    def test_non_string_category_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Invalid category ID"):
            parse_product_fields(payload(category=12345))

    def test_non_object_body_rejected(self) -> None:
        with pytest.raises(ValidationError, match="JSON object"):
            parse_product_fields(["Phone"])

    def test_overlong_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            parse_product_fields(payload(name="x" * 201))


class TestCoercePrice:
    @pytest.mark.parametrize("value,expected", [(3, 3.0), ("3", 3.0), ("0.5", 0.5), (1e3, 1000.0)])
    def test_numeric_values(self, value, expected) -> None:
        assert coerce_price(value) == expected

    @pytest.mark.parametrize("value", ["abc", "nan", "inf", True, [1], {}])
    def test_rejects_non_numbers(self, value) -> None:
        with pytest.raises(ValidationError):
            coerce_price(value)

    def test_rejects_negative(self) -> None:
        with pytest.raises(ValidationError, match="greater than or equal to 0"):
            coerce_price("-1")


class TestImageUrlField:
    @pytest.mark.parametrize("value", ["foo.png", "/uploads/a.png", "//cdn.test/x.png", "ftp://cdn.test/x.png", "http://"])
    def test_non_absolute_urls_rejected(self, value: str) -> None:
        """Should only accept externally hosted http(s) images."""
        with pytest.raises(ValidationError) as exc_info:
            parse_product_fields(payload(imageURL=value))
        assert exc_info.value.details == ["\"imageURL\" must be a valid absolute uri"]

    def test_surrounding_whitespace_trimmed(self) -> None:
        fields = parse_product_fields(payload(imageURL="  https://cdn.test/p.jpg "))
        assert fields.image_url == "https://cdn.test/p.jpg"

    def test_non_string_rejected(self) -> None:
        with pytest.raises(ValidationError):
            parse_product_fields(payload(imageURL=42))
