"""Tests for the simplest-path resolver."""

from textanchor.dom import HtmlDocument
from textanchor.selectors import PathResolver, ScoredPath, SelectorCache


class CountingDocument(HtmlDocument):
    """Document that records how often it is queried."""

    def __init__(self, root, url=None) -> None:
        super().__init__(root, url)
        self.queries: list[str] = []

    def count_matches(self, expr: str) -> int:
        self.queries.append(expr)
        return super().count_matches(expr)


class TestSimplestPath:
    """Tests for PathResolver.simplest_path."""

    def test_unique_tag_wins_over_longer_id(self) -> None:
        doc = HtmlDocument.from_string('<div id="x"><p>hi</p></div>')
        resolver = PathResolver(doc)

        assert resolver.simplest_path(doc.find_all("div")[0]) == "div"

    def test_class_disambiguates(self) -> None:
        doc = HtmlDocument.from_string('<p class="a">1</p><p class="b">2</p>')
        resolver = PathResolver(doc)

        assert resolver.simplest_path(doc.find_all("p")[1]) == "p.b"

    def test_climbs_when_parent_is_unique(self) -> None:
        doc = HtmlDocument.from_string(
            "<div><span>one</span></div>"
            "<section><span>two</span></section>"
            "<div><span>three</span></div>"
        )
        resolver = PathResolver(doc)
        span = doc.find_all("span")[1]

        assert doc.count_matches("span") == 3
        assert resolver.simplest_path(span) == "section > span"

    def test_tie_keeps_local_selector(self) -> None:
        doc = HtmlDocument.from_string("<div><p>x</p><p>y</p></div>")
        resolver = PathResolver(doc)

        assert resolver.simplest_path(doc.find_all("p")[0]) == "p"

    def test_climbs_more_than_one_level(self) -> None:
        doc = HtmlDocument.from_string(
            '<ul class="menu"><li><a>1</a></li></ul>'
            "<ul><li><a>2</a></li></ul>"
        )
        resolver = PathResolver(doc)
        a = doc.find_all("a")[0]

        path = resolver.simplest_path(a)

        assert path == "ul.menu > li > a"
        assert doc.find_all(path) == [a]

    def test_root_terminates(self) -> None:
        doc = HtmlDocument.from_string("<p>x</p>")
        resolver = PathResolver(doc)

        assert resolver.simplest_path(doc.root) == "html"

    def test_suffix_is_appended(self) -> None:
        doc = HtmlDocument.from_string('<div id="x"><p>hi</p></div>')
        resolver = PathResolver(doc)

        path = resolver.resolve(doc.find_all("div")[0], "p")

        assert path == ScoredPath("div > p", 1)

    def test_path_always_matches_node(self) -> None:
        doc = HtmlDocument.from_string(
            '<div class="card a"><p class="t">one <b>two</b></p><p>three</p></div>'
            '<div class="card b"><p class="t">four</p><p class="t x:y">five</p></div>'
            '<main id="1st"><p>six</p><p>seven <i class="t">eight</i></p></main>'
        )
        resolver = PathResolver(doc)

        for element in doc.root.iter():
            path = resolver.simplest_path(element)
            matches = doc.find_all(path)
            assert len(matches) >= 1
            assert element in matches, f"{path} does not match <{element.tag}>"

    def test_prefixed_tag_is_narrowed_by_parent(self) -> None:
        doc = HtmlDocument.from_string("<div><p>a</p><p>Hello<o:p>world</o:p></p></div>")
        resolver = PathResolver(doc)
        element = next(e for e in doc.root.iter() if e.tag == "o:p")

        path = resolver.simplest_path(element)

        assert path == "p > *"
        assert doc.find_all(path) == [element]


class TestMemoization:
    """Tests for the request-scoped cache."""

    def test_path_is_remembered(self) -> None:
        doc = HtmlDocument.from_string('<p class="a">1</p><p>2</p>')
        resolver = PathResolver(doc)
        p = doc.find_all("p")[0]

        path = resolver.simplest_path(p)

        assert resolver.cache.cached_path(p).selector == path

    def test_counts_are_queried_once(self) -> None:
        root = HtmlDocument.from_string("<div><p>x</p><p>y</p></div>").root
        doc = CountingDocument(root)
        resolver = PathResolver(doc)
        p = doc.find_all("p")[0]

        resolver.simplest_path(p)
        first = len(doc.queries)
        resolver.simplest_path(p)
        resolver.simplest_path(doc.find_all("p")[1])

        assert len(doc.queries) == first
        assert len(set(doc.queries)) == len(doc.queries)

    def test_fresh_cache_sees_mutations(self) -> None:
        doc = HtmlDocument.from_string("<p>1</p><p>2</p>")
        p = doc.find_all("p")[0]
        assert PathResolver(doc).simplest_path(p) == "p"

        p.set("id", "only")
        second = doc.find_all("p")[1]
        second.getparent().remove(second)

        cache = SelectorCache(doc)
        assert cache.count_matches("p") == 1
        assert PathResolver(doc, cache).simplest_path(p) == "p"
