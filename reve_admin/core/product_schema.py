# core/product_schema.py

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Set


@dataclass
class SizeEntry:
    name: str = ""
    price_delta: float = 0.0


@dataclass
class ColorEntry:
    name: str = ""
    hex_code: str = ""
    image: str = ""


@dataclass
class FabricColour:
    """面料下面的颜色色卡"""

    name: str = ""
    hex_code: str = ""
    image: str = ""


@dataclass
class FabricEntry:
    name: str = ""
    is_shared: bool = False
    image_url: str = ""
    colours: List[FabricColour] = field(default_factory=list)


@dataclass
class StyleOption:
    label: str = ""
    description: str = ""
    icon: str = ""  # 图标 URL，或者内联的 SVG 代码
    price_delta: float = 0.0
    sizes: List[str] = field(default_factory=list)  # 为空表示所有尺寸都适用


@dataclass
class StyleGroup:
    """一组互斥的款式选项，比如 "Headboard Style" """

    name: str = ""
    options: List[StyleOption] = field(default_factory=list)


@dataclass
class MattressOption:
    name: str = ""
    description: str = ""
    image: str = ""
    price: float = 0.0
    source_product: Optional[int] = None  # 从哪个商品导入的（可跨商品复用）


@dataclass
class DimensionRow:
    measurement: str = ""  # 比如 "Width" / "Length"
    values: Dict[str, str] = field(default_factory=dict)  # 尺寸列名 -> 文本值


@dataclass
class DimensionTable:
    columns: List[str] = field(default_factory=list)
    rows: List[DimensionRow] = field(default_factory=list)


@dataclass
class FaqEntry:
    question: str = ""
    answer: str = ""


@dataclass
class CustomInfoSection:
    title: str = ""
    content: str = ""


@dataclass
class ProductDraft:
    """商品编辑草稿（表单里还没保存的数据）"""

    id: Optional[int] = None
    name: str = ""
    description: str = ""
    short_description: str = ""
    category: Optional[int] = None
    subcategory: Optional[int] = None

    price: float = 0.0
    original_price: Optional[float] = None
    discount_percentage: float = 0.0
    delivery_charges: float = 0.0

    in_stock: bool = True
    is_bestseller: bool = False
    is_new: bool = False
    show_size_icons: bool = False

    images: List[str] = field(default_factory=list)
    videos: List[str] = field(default_factory=list)
    # 编辑模式下服务端已经有的图片数量（大于 0 时可以不传新图）
    existing_image_count: int = 0

    features: List[str] = field(default_factory=list)
    sizes: List[SizeEntry] = field(default_factory=list)
    colors: List[ColorEntry] = field(default_factory=list)
    fabrics: List[FabricEntry] = field(default_factory=list)
    styles: List[StyleGroup] = field(default_factory=list)
    mattresses: List[MattressOption] = field(default_factory=list)

    dimensions: DimensionTable = field(default_factory=DimensionTable)
    faqs: List[FaqEntry] = field(default_factory=list)
    delivery_title: str = ""
    delivery_info: str = ""
    returns_title: str = ""
    returns_guarantee: str = ""
    custom_info: List[CustomInfoSection] = field(default_factory=list)

    filter_option_ids: Set[int] = field(default_factory=set)

    @property
    def is_new_product(self) -> bool:
        return self.id is None
