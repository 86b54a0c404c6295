"""
主要用途のカテゴリ分類

(カテゴリ, キーワード) の順序付きテーブルを上から順に判定し、
最初に一致したカテゴリを採用します。
"""
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

OTHER_CATEGORY = 'その他'

# 判定順: 住宅系 -> 商業系 -> 業務系 -> 工業系 -> 公共系
DEFAULT_USAGE_TAXONOMY: List[Tuple[str, Tuple[str, ...]]] = [
    ('住宅系', ('共同住宅', '長屋', '一戸建', '寄宿舎', '下宿', 'アパート', 'マンション')),
    ('商業系', ('店舗', 'ホテル', '飲食', '物販', '百貨店', 'スーパー', '旅館', '料理店')),
    ('業務系', ('事務所', '銀行', 'オフィス')),
    ('工業系', ('工場', '倉庫', '物流', '作業所')),
    ('公共系', ('学校', '病院', '診療所', '福祉', '保育', '幼稚園',
             '図書館', '美術館', '体育館', '公民館', '庁舎')),
]


class UsageCategorizer:
    """主要用途テキストの分類器"""

    def __init__(self, taxonomy: Optional[Iterable[Tuple[str, Sequence[str]]]] = None,
                 other_category: str = OTHER_CATEGORY):
        """
        Args:
            taxonomy: [(カテゴリ, [キーワード, ...]), ...]（順序が判定の優先度）
            other_category: どれにも一致しない場合のカテゴリ
        """
        if taxonomy is None:
            taxonomy = DEFAULT_USAGE_TAXONOMY

        self.rules = [
            (category, tuple(keyword.lower() for keyword in keywords))
            for category, keywords in taxonomy
        ]
        self.other_category = other_category
        logger.debug(f"Initialized UsageCategorizer with {len(self.rules)} rules")

    @property
    def categories(self) -> List[str]:
        return [category for category, _ in self.rules] + [self.other_category]

    def categorize(self, usage: Optional[str]) -> str:
        """
        用途テキストをカテゴリに分類

        Args:
            usage: 主要用途（例: "共同住宅、店舗"）

        Returns:
            カテゴリ名（例: "住宅系"）
        """
        if not usage:
            return self.other_category

        text = str(usage).lower()
        for category, keywords in self.rules:
            if any(keyword in text for keyword in keywords):
                return category
        return self.other_category
