# config/settings.py

import os
from pathlib import Path

from dotenv import load_dotenv

# 加载 .env（如果存在）
load_dotenv()

# 项目根目录
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# === 后端 API 配置 ===
API_BASE_URL = os.getenv("REVE_API_BASE_URL", "https://reve-backend-deploy.onrender.com/api").rstrip("/")
REQUEST_TIMEOUT = float(os.getenv("REVE_REQUEST_TIMEOUT", "30"))

# 并发请求（加载表单数据、批量上传图片）使用的线程数
MAX_WORKERS = int(os.getenv("REVE_MAX_WORKERS", "4"))

# === 登录状态存储（相当于浏览器里的 localStorage） ===
SESSION_FILE = Path(os.getenv("REVE_SESSION_FILE", str(BASE_DIR / "data" / "session.json")))

# === 提交限制 ===
# 序列化后的商品 JSON 最大字节数，超过就拒绝提交
MAX_PAYLOAD_BYTES = 2_500_000

# SVG 图标内联的最大字符数（超过就改为上传文件）
SVG_INLINE_MAX_CHARS = 50_000

# === 尺寸表规则 ===
# 款式里出现 wingback 时，宽度 +4cm
WINGBACK_KEYWORD = "wingback"
WINGBACK_WIDTH_OFFSET_CM = 4

# 订单状态操作
ORDER_ACTIONS = ("mark_paid", "mark_shipped", "mark_delivered")
