"""
收据服务 - 生成租金收据数据
只读取租户/房间/设置快照，不修改聚合

收款链接格式: upi://pay?pa=<upi_id>&pn=<宿舍名>&am=<租金>&cu=INR
"""
import logging
import random
from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import Optional
from urllib.parse import quote

from hostel.config import settings as app_settings
from hostel.models.ontology import HostelSettings, Room, Tenant

logger = logging.getLogger(__name__)

# 与 JS encodeURIComponent 保持一致的保留字符
_URI_COMPONENT_SAFE = "!*'()"


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def format_receipt_date(moment: date) -> str:
    """en-IN 长日期格式，例如 5 January 2024"""
    return f"{moment.day} {moment.strftime('%B %Y')}"


def build_upi_link(upi_id: str, payee_name: str, amount: int) -> str:
    return f"upi://pay?pa={upi_id}&pn={encode_uri_component(payee_name)}&am={amount}&cu=INR"


class QRImageProvider:
    """根据收款链接生成二维码图片地址（外部二维码服务）"""

    def __init__(self, base_url: Optional[str] = None, size: Optional[str] = None):
        self.base_url = base_url or app_settings.QR_SERVICE_URL
        self.size = size or app_settings.QR_SIZE

    def image_for(self, link: str) -> str:
        return f"{self.base_url}?size={self.size}&data={encode_uri_component(link)}"


@dataclass
class ReceiptDocument:
    """收据数据"""
    receipt_no: str
    issued_on: str
    tenant_name: str
    tenant_mobile: str
    room_number: str
    amount: int
    joining_date: date
    hostel_name: str
    address: str
    contact_number: str
    signature_text: Optional[str]
    upi_link: str
    qr_image: str
    uses_custom_qr: bool

    def to_dict(self) -> dict:
        return asdict(self)


class ReceiptComposer:
    """
    收据生成器

    支持依赖注入以便于测试：
    - qr_provider: 二维码图片提供者
    - rng: 随机数生成器（未指定流水号时使用）
    """

    SERIAL_MAX = 9999

    def __init__(self, qr_provider: Optional[QRImageProvider] = None,
                 rng: Optional[random.Random] = None):
        self.qr_provider = qr_provider or QRImageProvider()
        self.rng = rng or random.Random()

    def receipt_number(self, year: int, serial: Optional[int] = None) -> str:
        """收据编号: RCP-<年份>-<4 位流水号>"""
        if serial is None:
            serial = self.rng.randint(0, self.SERIAL_MAX)
        elif not 0 <= serial <= self.SERIAL_MAX:
            raise ValueError(f"收据流水号必须在 0-{self.SERIAL_MAX} 之间，当前值: {serial}")
        return f"RCP-{year}-{serial:04d}"

    def compose(
        self,
        tenant: Tenant,
        room: Optional[Room],
        settings: HostelSettings,
        now: Optional[datetime] = None,
        serial: Optional[int] = None,
    ) -> ReceiptDocument:
        """生成收据；已上传自定义收款码时优先使用"""
        now = now or datetime.now()
        upi_link = build_upi_link(settings.upi_id, settings.hostel_name, tenant.rent)

        if settings.custom_qr_image:
            qr_image = settings.custom_qr_image
        else:
            try:
                qr_image = self.qr_provider.image_for(upi_link)
            except Exception as e:
                logger.error(f"QR image generation failed: {e}")
                qr_image = ""

        return ReceiptDocument(
            receipt_no=self.receipt_number(now.year, serial),
            issued_on=format_receipt_date(now),
            tenant_name=tenant.name,
            tenant_mobile=tenant.mobile,
            room_number=room.number if room else "N/A",
            amount=tenant.rent,
            joining_date=tenant.joining_date,
            hostel_name=settings.hostel_name,
            address=settings.address,
            contact_number=settings.contact_number,
            signature_text=settings.signature_text,
            upi_link=upi_link,
            qr_image=qr_image,
            uses_custom_qr=bool(settings.custom_qr_image),
        )
