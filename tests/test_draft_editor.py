import pytest

from reve_admin.core.draft_editor import (
    add_variant_entry,
    remove_variant_entry,
    add_dimension_column,
    merge_from_product,
    merge_faqs,
)
from reve_admin.core.product_normalizer import draft_from_product
from reve_admin.core.product_schema import ProductDraft, SizeEntry, FaqEntry, DimensionRow, StyleGroup


def test_add_empty_and_prefilled_entries():
    draft = ProductDraft()
    assert add_variant_entry(draft, "sizes") == SizeEntry()
    add_variant_entry(draft, "sizes", {"name": "King", "price_delta": 60})
    add_variant_entry(draft, "sizes", "King")  # 不去重
    assert [s.name for s in draft.sizes] == ["", "King", "King"]

    add_variant_entry(draft, "styles", {"name": "Headboard", "options": ["Plain"]})
    assert draft.styles[0].options[0].label == "Plain"

    add_variant_entry(draft, "dimension_rows", {"measurement": "Width", "values": {"King": "150 cm"}})
    assert draft.dimensions.rows == [DimensionRow(measurement="Width", values={"King": "150 cm"})]

    add_variant_entry(draft, "images", " https://x/1.jpg ")
    assert draft.images == ["https://x/1.jpg"]


def test_remove_entry_by_position():
    draft = ProductDraft(sizes=[SizeEntry(name="A"), SizeEntry(name="B")])
    removed = remove_variant_entry(draft, "sizes", 0)
    assert removed.name == "A"
    assert [s.name for s in draft.sizes] == ["B"]
    with pytest.raises(IndexError):
        remove_variant_entry(draft, "sizes", 3)


def test_unknown_axis():
    with pytest.raises(ValueError):
        add_variant_entry(ProductDraft(), "widgets")


def test_add_dimension_column_skips_duplicates():
    draft = ProductDraft()
    add_dimension_column(draft, "King")
    add_dimension_column(draft, " King ")
    add_dimension_column(draft, "")
    assert draft.dimensions.columns == ["King"]


def test_merge_faqs_case_insensitive():
    existing = [FaqEntry("Is assembly included?", "Yes, on premium delivery.")]
    incoming = [
        FaqEntry("IS ASSEMBLY INCLUDED?", "yes, on premium delivery."),
        FaqEntry("Can I return it?", "Within 14 days."),
        FaqEntry("can i return it?", "within 14 days."),
    ]
    merged = merge_faqs(existing, incoming)
    assert [f.question for f in merged] == ["Is assembly included?", "Can I return it?"]


def test_merge_styles_appends_without_mutating(sample_product):
    draft = ProductDraft(styles=[StyleGroup(name="Feet")])
    merged = merge_from_product(draft, sample_product, "styles")
    assert [g.name for g in merged.styles] == ["Feet", "Headboard Style", "Storage"]
    assert len(draft.styles) == 1


def test_merge_mattresses_records_source(sample_product):
    merged = merge_from_product(ProductDraft(), sample_product, "mattresses")
    assert merged.mattresses[0].source_product == 12


def test_merge_text_axes(sample_product):
    draft = ProductDraft(description="old", delivery_info="old delivery")
    merged = merge_from_product(draft, sample_product, "descriptions")
    assert merged.description == "UK handcrafted divan."
    assert merged.features == ["UK Handcrafted", "10-Year Guarantee"]

    merged = merge_from_product(draft, {"delivery_info": ""}, "delivery")
    assert merged.delivery_info == "old delivery"


def test_merge_faqs_axis(sample_product):
    draft = draft_from_product(sample_product)
    source = {"faqs": [
        {"question": "is assembly included?", "answer": "YES, ON PREMIUM DELIVERY."},
        {"question": "How long is delivery?", "answer": "3-5 working days."},
    ]}
    merged = merge_from_product(draft, source, "faqs")
    assert [f.question for f in merged.faqs] == ["Is assembly included?", "How long is delivery?"]


def test_merge_rejects_unknown_axis():
    with pytest.raises(ValueError):
        merge_from_product(ProductDraft(), {}, "price")
