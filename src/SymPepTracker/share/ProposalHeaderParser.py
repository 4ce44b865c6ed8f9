import logging
import re
from typing import Dict, List, Optional

from SymPepTracker.dto.ProposalHeaderDto import ProposalHeaderDto
from SymPepTracker.share.enums.ProposalStatus import ProposalStatus
from SymPepTracker.share.enums.ProposalType import ProposalType
from SymPepTracker.share.errors import ValidationError
from SymPepTracker.share.StringUtils import StringUtils
from SymPepTracker.share.TimeUtils import TimeUtils

logger = logging.getLogger(__name__)

# 支持 'Author: x'、'**Author:** x'、'**Author**: x' 以及列表项 '- Author: x'
HEADER_LINE = re.compile(r"^(?:[-*]\s+)?\**([A-Za-z][A-Za-z\- ]*?)\**\s*[:：]\s*\**\s*(.*?)\s*$")

# 头部字段别名 -> 规范名称
FIELD_ALIASES: Dict[str, str] = {
    "sympep": "number",
    "number": "number",
    "title": "title",
    "author": "author",
    "authors": "author",
    "champion": "author",
    "champions": "author",
    "status": "status",
    "type": "type",
    "created": "created",
    "resolution": "resolution",
    "discussion": "discussion",
    "discussions": "discussion",
    "discussions-to": "discussion",
    "post-history": "discussion",
}


class ProposalHeaderParser:
    """
    提案模板头部解析器。<br>
    只读取结构化的头部字段 (Author / Status / Type / Created / Resolution 等)，
    遇到第一个二级标题 (正文开始) 即停止，不解析正文。
    """

    @staticmethod
    def _collect_fields(text: str) -> Dict[str, List[str]]:
        fields: Dict[str, List[str]] = {}
        for raw_line in text.splitlines():
            line = raw_line.strip()
            if line.startswith("## "):
                break
            if line.startswith("# ") and "heading" not in fields:
                fields["heading"] = [line]
                continue
            match = HEADER_LINE.match(line)
            if not match:
                continue
            key = FIELD_ALIASES.get(match.group(1).strip().lower())
            if key is None:
                continue
            fields.setdefault(key, []).append(match.group(2).strip("* "))
        return fields

    @staticmethod
    def _parse_number(value: Optional[str]) -> Optional[int]:
        if value is None:
            return None
        text = re.sub(r"(?i)^sympep\s*", "", value).strip()
        if not text or re.fullmatch(r"[Xx]+", text):
            return None
        if not text.isdigit():
            raise ValidationError(f"无法识别的提案编号: '{value}'")
        return int(text)

    @classmethod
    def parse(cls, text: str) -> ProposalHeaderDto:
        """
        解析模板文本的头部。

        Raises:
            ValidationError: 缺少必需字段 (Title/Author/Type/Created) 或字段格式错误。
        """
        fields = cls._collect_fields(text)

        def first(key: str) -> Optional[str]:
            values = fields.get(key)
            return values[0] if values else None

        title_source = first("title") or first("heading")
        title = StringUtils.clean_title(title_source) if title_source else ""
        if not title:
            raise ValidationError("提案模板缺少标题。")

        champions: List[str] = []
        for value in fields.get("author", []):
            champions.extend(StringUtils.split_people(value))
        champions = StringUtils.normalize_people(champions)
        if not champions:
            raise ValidationError("提案模板缺少 Author 字段。")

        type_value = first("type")
        created_value = first("created")
        if not type_value or not created_value:
            raise ValidationError("提案模板缺少 Type 或 Created 字段。")

        try:
            proposal_type = ProposalType.from_display_name(type_value)
            created = TimeUtils.parse_created_date(created_value)
            status_value = first("status")
            status = ProposalStatus.from_display_name(status_value) if status_value else None
        except ValueError as e:
            raise ValidationError(str(e)) from e

        resolution_value = first("resolution")
        resolution = None
        if resolution_value:
            links = StringUtils.extract_links(resolution_value)
            resolution = links[0] if links else resolution_value

        discussions: List[str] = []
        for value in fields.get("discussion", []):
            discussions.extend(StringUtils.extract_links(value))

        header = ProposalHeaderDto(
            title=title,
            type=proposal_type,
            created=created,
            champions=champions,
            status=status,
            number=cls._parse_number(first("number")),
            resolution=resolution,
            discussions=discussions,
        )
        logger.debug(f"已解析提案模板头部: '{header.title}' ({header.type.display_name})")
        return header
