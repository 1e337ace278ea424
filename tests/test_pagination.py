from verivault.rendering.pagination import (
    drop_sparse_pages,
    paginate,
    split_into_pages,
    word_count,
)


def words(n, prefix='w'):
    return ' '.join(f'{prefix}{i}' for i in range(n))


class TestSplitIntoPages:

    def test_650_words_make_three_pages(self):
        pages = split_into_pages(words(650))
        assert [word_count(p) for p in pages] == [300, 300, 50]

    def test_exact_multiple(self):
        assert len(split_into_pages(words(600))) == 2

    def test_line_breaks_survive(self):
        text = '**Incident**\nLocation: Lobby\n\nQuiet night'
        assert split_into_pages(text) == [text]

    def test_break_inside_a_line(self):
        pages = split_into_pages('a b c\nd e', words_per_page=2)
        assert pages == ['a b', 'c\nd', 'e']

    def test_empty_text(self):
        assert split_into_pages('') == []


class TestDropSparsePages:

    def test_short_tail_is_dropped(self):
        pages = paginate(words(610))
        assert len(pages) == 2
        assert word_count(pages[-1]) == 300

    def test_first_page_kept_when_all_short(self):
        pages = drop_sparse_pages(['one two', 'three'])
        assert pages == ['one two']

    def test_nothing_to_keep(self):
        assert drop_sparse_pages([]) == []

    def test_custom_threshold(self):
        assert drop_sparse_pages([words(5), words(3)], min_words=4) == [words(5)]
