"""
Word-count pagination for printable HTML reports
"""
from typing import List

WORDS_PER_PAGE = 300
MIN_WORDS_PER_PAGE = 20


def word_count(text: str) -> int:
    return len(text.split())


def split_into_pages(text: str, words_per_page: int = WORDS_PER_PAGE) -> List[str]:
    """
    Cut text into chunks of at most words_per_page words

    Line breaks inside a chunk are kept so headings and label rows survive.
    """
    if words_per_page < 1:
        raise ValueError('words_per_page must be positive')

    pages: List[str] = []
    lines: List[str] = []
    count = 0

    for raw_line in (text or '').splitlines():
        words = raw_line.split()
        if not words:
            lines.append('')
            continue
        current: List[str] = []
        for word in words:
            if count == words_per_page:
                if current:
                    lines.append(' '.join(current))
                    current = []
                pages.append('\n'.join(lines).strip('\n'))
                lines = []
                count = 0
            current.append(word)
            count += 1
        lines.append(' '.join(current))

    if count:
        pages.append('\n'.join(lines).strip('\n'))
    return pages


def drop_sparse_pages(pages: List[str], min_words: int = MIN_WORDS_PER_PAGE) -> List[str]:
    """
    Remove near-empty pages

    When every page is below the threshold the first one is kept so the
    document still has somewhere to carry its header and footer.
    """
    kept = [page for page in pages if word_count(page) >= min_words]
    if not kept and pages:
        return pages[:1]
    return kept


def paginate(text: str, words_per_page: int = WORDS_PER_PAGE, min_words: int = MIN_WORDS_PER_PAGE) -> List[str]:
    return drop_sparse_pages(split_into_pages(text, words_per_page), min_words)
