import asyncio
import json
import logging
import os
import tempfile
from typing import List, Optional, Sequence

from humps import camelize

from SymPepTracker.dto.ProposalDto import ProposalDto
from SymPepTracker.share.TimeUtils import TimeUtils

logger = logging.getLogger(__name__)


class RegistryPublisher:
    """
    负责把已编号的提案发布到人类可读的索引文档。

    每次发布都会渲染完整索引并原子替换目标文件，因此重复发布是幂等的，
    调用方可以放心地"至少一次"地重试。
    """

    def __init__(
        self,
        index_path: str,
        json_path: Optional[str] = None,
        title: str = "SymPEP Index",
    ):
        """
        :param index_path: Markdown 索引文件路径。
        :param json_path: 可选的 JSON 索引文件路径 (键名为 camelCase)。
        :param title: 索引文档的一级标题。
        """
        self.index_path = index_path
        self.json_path = json_path
        self.title = title

    @staticmethod
    def _escape_cell(value: str) -> str:
        return value.replace("|", "\\|").replace("\n", " ")

    def render_markdown(self, proposals: Sequence[ProposalDto]) -> str:
        """把提案列表渲染为 Markdown 表格。"""
        lines: List[str] = [
            f"# {self.title}",
            "",
            "| Number | Title | Type | Status | Champions |",
            "|---:|---|---|---|---|",
        ]
        for proposal in proposals:
            if proposal.number is None:
                continue
            lines.append(
                "| {number} | {title} | {type} | {status} | {champions} |".format(
                    number=proposal.number,
                    title=self._escape_cell(proposal.title),
                    type=proposal.type.display_name,
                    status=proposal.status.display_name,
                    champions=self._escape_cell(", ".join(proposal.champions)),
                )
            )
        lines.append("")
        return "\n".join(lines)

    def render_json(self, proposals: Sequence[ProposalDto]) -> str:
        """把提案列表渲染为 JSON 文本，字段名转换为 camelCase。"""
        entries = []
        for proposal in proposals:
            if proposal.number is None:
                continue
            data = proposal.model_dump(mode="json")
            data["type"] = proposal.type.display_name
            data["status"] = proposal.status.display_name
            entries.append(data)
        payload = {
            "title": self.title,
            "generated_at": TimeUtils.utc_now().isoformat(),
            "proposals": entries,
        }
        return json.dumps(camelize(payload), ensure_ascii=False, indent=2)

    @staticmethod
    def _write_atomic(path: str, content: str):
        """先写临时文件再替换，读者永远不会看到写了一半的索引。"""
        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".registry-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    async def publish(self, proposals: Sequence[ProposalDto]):
        """
        发布索引。文件写入在线程中执行，避免阻塞事件循环。

        Raises:
            OSError: 写入失败，由调用方决定是否重试。
        """
        markdown = self.render_markdown(proposals)
        await asyncio.to_thread(self._write_atomic, self.index_path, markdown)
        if self.json_path:
            await asyncio.to_thread(self._write_atomic, self.json_path, self.render_json(proposals))
        numbered = sum(1 for p in proposals if p.number is not None)
        logger.info(f"注册表索引已发布到 '{self.index_path}'，共 {numbered} 个提案。")
