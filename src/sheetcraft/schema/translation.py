"""
Header translation.

Header cells are often written in a natural language other than the one used for
identifiers. HeaderTranslator turns them into translated text through a tiered
chain:
1. ExactDictionaryResolver: exact lookup in a bilingual dictionary
2. ContainmentDictionaryResolver: first dictionary key contained in the header
3. A remote translation service, called once for the whole batch and only when
   some header is still unresolved

Service failures never end an inference. They are recorded in the debug ledger
and the dictionary result is used instead.
"""

import logging
from types import MappingProxyType
from typing import List, Mapping, Optional, Protocol, Sequence

from sheetcraft.exceptions import TransientServiceError
from sheetcraft.utils.debug import DebugLedger


logger = logging.getLogger(__name__)


JA_EN_DICTIONARY: Mapping[str, str] = MappingProxyType({
    # ids
    "ID": "id",
    "メールID": "mailId",
    "メールID枝番": "mailIdBranch",
    "ユーザーID": "userId",
    "顧客ID": "customerId",
    # common fields
    "件名": "subject",
    "名前": "name",
    "氏名": "fullName",
    "受信日": "receivedDate",
    "確認者": "confirmer",
    "ステータス": "status",
    "分類": "category",
    "メールアドレス": "email",
    "広告媒体": "advertisingMedium",
    "初回希望日": "firstPreferredDate",
    "初回希望院": "firstPreferredClinic",
    "問い合わせ方法": "inquiryMethod",
    "タグ": "tags",
    "確認日": "confirmationDate",
    "不備なし／あり": "defectStatus",
    "不備内容詳細": "defectDetails",
    "修正完了日": "correctionCompletedDate",
    "集計用": "forAggregation",
    # dates
    "作成日": "createdDate",
    "更新日": "updatedDate",
    "削除日": "deletedDate",
    "登録日": "registeredDate",
    # status / type
    "種類": "type",
    "状態": "state",
    "区分": "division",
    # people
    "担当者": "assignee",
    "作成者": "creator",
    "更新者": "updater",
    # content
    "内容": "content",
    "詳細": "details",
    "備考": "remarks",
    "メモ": "memo",
    "コメント": "comment",
    "説明": "description",
    # numbers
    "数": "count",
    "数値": "number",
    "金額": "amount",
    "価格": "price",
    "合計": "total",
})


class TranslationService(Protocol):
    """Remote batch translator (see sheetcraft.sheets.translate.TranslationClient)."""

    def translate(self, texts: Sequence[str], source: str, target: str) -> List[str]:
        ...


class HeaderResolver:
    """One tier of the local translation chain.

    ``resolve`` returns the translation, or None to pass the header to the next tier.
    """

    def __init__(self, dictionary: Mapping[str, str]):
        self.dictionary = dictionary

    def resolve(self, text: str) -> Optional[str]:
        raise NotImplementedError


class ExactDictionaryResolver(HeaderResolver):
    def resolve(self, text: str) -> Optional[str]:
        return self.dictionary.get(text.strip())


class ContainmentDictionaryResolver(HeaderResolver):
    """Matches the first dictionary key (in dictionary order) found inside the header."""

    def resolve(self, text: str) -> Optional[str]:
        trimmed = text.strip()
        for key, value in self.dictionary.items():
            if key and key in trimmed:
                return value
        return None


class HeaderTranslator:
    """Translate header texts through dictionary resolvers and an optional service.

    Args:
        dictionary: Source-language to identifier-word mapping
        service: Remote translator; None disables the service tier
        target_language: Language code passed to the service
    """

    def __init__(
        self,
        dictionary: Mapping[str, str] = JA_EN_DICTIONARY,
        service: Optional[TranslationService] = None,
        target_language: str = "en",
    ):
        self.resolvers: List[HeaderResolver] = [
            ExactDictionaryResolver(dictionary),
            ContainmentDictionaryResolver(dictionary),
        ]
        self.service = service
        self.target_language = target_language

    def resolve_locally(self, text: str) -> Optional[str]:
        for resolver in self.resolvers:
            resolved = resolver.resolve(text)
            if resolved is not None:
                return resolved
        return None

    def translate(
        self,
        headers: Sequence[str],
        source_language: str,
        ledger: Optional[DebugLedger] = None,
    ) -> List[str]:
        """Translate every header.

        Args:
            headers: Header texts as they appear in the sheet
            source_language: Language code of the headers (e.g. "ja")
            ledger: Debug ledger receiving translation facts

        Returns:
            One translated text per header, in input order. Headers no tier could
            translate come back trimmed but otherwise unchanged.
        """
        ledger = ledger if ledger is not None else DebugLedger()
        originals = [str(h) for h in headers]

        resolved = [self.resolve_locally(h) for h in originals]
        dictionary_results = [
            r if r is not None else h.strip() for r, h in zip(resolved, originals)
        ]
        success_count = sum(1 for r in resolved if r is not None)

        ledger.set("dictionaryTranslations", {
            "successCount": success_count,
            "totalCount": len(originals),
            "mappings": [
                {"original": h, "translated": t}
                for h, t in zip(originals, dictionary_results)
            ],
        })

        if success_count == len(originals):
            ledger.set("translationMethod", "dictionary")
            return dictionary_results

        if self.service is None:
            ledger.set("translationMethod", "dictionary")
            return dictionary_results

        try:
            service_results = self.service.translate(
                originals, source_language, self.target_language
            )
        except TransientServiceError as e:
            logger.warning("Header translation failed, using dictionary results: %s", e)
            ledger.set("translationError", str(e))
            ledger.set("translationMethod", "dictionary-fallback-error")
            return dictionary_results

        ledger.set("translationResponse", {
            "receivedCount": len(service_results),
            "translations": list(service_results),
        })

        if not any(service_results):
            message = (
                "No translations returned from API, using dictionary fallback"
                if not service_results
                else "All API translations were empty, using dictionary fallback"
            )
            logger.warning(message)
            ledger.set("translationWarning", message)
            ledger.set("translationMethod", "dictionary-fallback")
            return dictionary_results

        ledger.set("translationMethod", "api+dictionary")
        merged = []
        for idx, original in enumerate(originals):
            service_text = service_results[idx] if idx < len(service_results) else ""
            merged.append(service_text or dictionary_results[idx] or original)
        return merged
