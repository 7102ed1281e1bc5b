"""
法令XML（e-Gov 法令標準XML）の読み込み

法令XMLを条項（項・号・号の細分）単位の Provision に分解する。
各 Provision にはその階層の本文（下位の号は含まない）と、
その階層に直接付いている表（TableStruct）の行が入る。
"""
import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union

from bs4 import BeautifulSoup, Tag

from .models import Provision, ProvisionCoordinate
from .parser import is_yomikae_provision

logger = logging.getLogger(__name__)

# 条を含みうる構造要素（編・章・節・款・目）
STRUCTURE_TAGS = ("Part", "Chapter", "Section", "Subsection", "Division")

# 制定時附則の suppl_provision_title
INITIAL_SUPPL_TITLE = "附則"


@dataclass
class LawDocument:
    """法令XMLの読み込み結果"""
    law_num: str
    law_title: str = ""
    provisions: List[Provision] = field(default_factory=list)


# =============================================================================
# XML Helpers
# =============================================================================

def get_text(node: Optional[Tag]) -> str:
    """要素内の文字列を連結する（ルビの読み Rt は除く）"""
    if node is None:
        return ""
    return "".join(
        s for s in node.find_all(string=True)
        if s.parent is None or s.parent.name != "Rt"
    ).strip()


def find_child(node: Tag, tag: str) -> Optional[Tag]:
    """指定タグの最初の子要素を取得"""
    return node.find(tag, recursive=False)


def find_children(node: Tag, tag: str) -> List[Tag]:
    """指定タグの全子要素を取得"""
    return node.find_all(tag, recursive=False)


def sentence_text(node: Optional[Tag]) -> str:
    """ParagraphSentence / ItemSentence 等の中の Sentence を連結する"""
    if node is None:
        return ""
    return "".join(get_text(s) for s in node.find_all("Sentence"))


def table_rows(node: Tag) -> Tuple[Tuple[str, ...], ...]:
    """要素に直接付いている表の行（見出し行は除く）"""
    rows = []
    for table_struct in find_children(node, "TableStruct"):
        table = find_child(table_struct, "Table")
        if table is None:
            continue
        for row in find_children(table, "TableRow"):
            rows.append(tuple(get_text(col) for col in find_children(row, "TableColumn")))
    return tuple(rows)


# =============================================================================
# 条項の走査
# =============================================================================

def iter_articles(container: Tag) -> Iterator[Tag]:
    """編・章・節などをたどって条を文書順に列挙する"""
    stack = [container]
    while stack:
        node = stack.pop()
        children = [c for c in node.children if isinstance(c, Tag)]
        # 文書順を保つため逆順に積む
        for child in reversed(children):
            if child.name == "Article" or child.name in STRUCTURE_TAGS:
                stack.append(child)
        if node.name == "Article":
            yield node


def paragraph_provisions(
    paragraph: Tag,
    article_num: str,
    suppl_title: Optional[str]
) -> List[Provision]:
    """項とその号・号の細分を Provision にする"""
    para_num = paragraph.get("Num")
    coordinate = ProvisionCoordinate(
        article=article_num,
        paragraph=para_num,
        suppl_provision_title=suppl_title,
    )
    provisions = [Provision(
        coordinate,
        text=sentence_text(find_child(paragraph, "ParagraphSentence")),
        table=table_rows(paragraph),
    )]

    for item in find_children(paragraph, "Item"):
        item_coordinate = ProvisionCoordinate(
            article=article_num,
            paragraph=para_num,
            item=item.get("Num"),
            suppl_provision_title=suppl_title,
        )
        provisions.append(Provision(
            item_coordinate,
            text=sentence_text(find_child(item, "ItemSentence")),
            table=table_rows(item),
        ))
        for sub_item in find_children(item, "Subitem1"):
            provisions.append(Provision(
                ProvisionCoordinate(
                    article=article_num,
                    paragraph=para_num,
                    item=item.get("Num"),
                    sub_item=sub_item.get("Num"),
                    suppl_provision_title=suppl_title,
                ),
                text=sentence_text(find_child(sub_item, "Subitem1Sentence")),
                table=table_rows(sub_item),
            ))
    return provisions


def part_provisions(container: Tag, suppl_title: Optional[str]) -> List[Provision]:
    """本則または附則の全条項"""
    provisions = []
    for article in iter_articles(container):
        article_num = article.get("Num", "")
        for paragraph in find_children(article, "Paragraph"):
            provisions.extend(paragraph_provisions(paragraph, article_num, suppl_title))

    # 条のない附則は項が直接並ぶ
    for paragraph in find_children(container, "Paragraph"):
        provisions.extend(paragraph_provisions(paragraph, "", suppl_title))
    return provisions


def read_law_xml(xml: Union[str, bytes]) -> LawDocument:
    """
    法令XMLを読み込んで条項の一覧にする

    Raises:
        ValueError: LawNum がない（法令XMLではない）
    """
    soup = BeautifulSoup(xml, "xml")
    law_num_node = soup.find("LawNum")
    if law_num_node is None:
        raise ValueError("LawNum not found in law XML")

    document = LawDocument(
        law_num=get_text(law_num_node),
        law_title=get_text(soup.find("LawTitle")),
    )

    law_body = soup.find("LawBody")
    if law_body is None:
        logger.warning(f"No LawBody found for {document.law_num}")
        return document

    main_provision = find_child(law_body, "MainProvision")
    if main_provision is not None:
        document.provisions.extend(part_provisions(main_provision, None))

    for suppl in find_children(law_body, "SupplProvision"):
        suppl_title = suppl.get("AmendLawNum") or INITIAL_SUPPL_TITLE
        document.provisions.extend(part_provisions(suppl, suppl_title))

    logger.debug(f"{document.law_num}: {len(document.provisions)} provisions")
    return document


def iter_yomikae_provisions(document: LawDocument) -> Iterator[Provision]:
    """読み替え規定を含む条項だけを列挙する"""
    for provision in document.provisions:
        if is_yomikae_provision(provision):
            yield provision
