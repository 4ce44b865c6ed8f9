import re
from typing import List


class StringUtils:
    """
    提供字符串处理相关的静态工具方法
    """

    @staticmethod
    def clean_title(title: str) -> str:
        """
        清理提案标题，移除编号与状态前缀。<br>
        例如：'SymPEP XXXX — Equation class' -> 'Equation class'
              '[Draft] Static typing' -> 'Static typing'
        """
        cleaned = re.sub(r"^\s*#+\s*", "", title)
        cleaned = re.sub(r"^\s*([\[【].*?[\]】])\s*", "", cleaned)
        cleaned = re.sub(r"^SymPEP\s+(?:\d+|X+)\s*[:\-–—]*\s*", "", cleaned, flags=re.IGNORECASE)
        return cleaned.strip()

    @staticmethod
    def split_people(value: str) -> List[str]:
        """
        将 Author 字段拆分为负责人列表，去除邮箱部分并去重。<br>
        例如：'Alice <alice@example.org>, Bob' -> ['Alice', 'Bob']
        """
        people: List[str] = []
        for part in re.split(r"[,;]", value):
            name = re.sub(r"<[^>]*>", "", part).strip()
            if name and name not in people:
                people.append(name)
        return people

    @staticmethod
    def extract_links(value: str) -> List[str]:
        """
        从字段值中提取链接，支持 Markdown 链接 '[text](url)' 与裸链接。
        """
        markdown_links = re.findall(r"\[[^\]]*\]\((\S+?)\)", value)
        if markdown_links:
            return markdown_links
        bare_links = re.findall(r"(?:https?://|www\.)[^\s<>()\[\]]+", value)
        # 去掉被逗号分隔的列表粘在链接末尾的标点
        return [link.rstrip(".,;") for link in bare_links]

    @staticmethod
    def normalize_people(people) -> List[str]:
        """去除空白项并去重，保持首次出现的顺序。"""
        result: List[str] = []
        for person in people:
            name = (person or "").strip()
            if name and name not in result:
                result.append(name)
        return result
