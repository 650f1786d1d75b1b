"""
Step definitions for capture and relocation scenarios.

Documents are given inline as HTML; selections are made either by phrase or
by offsets inside named text nodes.
"""

from behave import given, then, when  # type: ignore[import-untyped]

from textanchor.capture import wrap_selection
from textanchor.dom import HtmlDocument, TextPoint, iter_text_nodes, text_content
from textanchor.relocate import SelectionResolver, find_selection, highlight_selection
from textanchor.selectors.resolver import PathResolver


def _element_containing(document, tag, text):
    """Return the first ``tag`` element whose text contains ``text``."""
    for element in document.find_all(tag):
        if text in text_content(element):
            return element
    raise AssertionError(f"No <{tag}> contains {text!r}")


def _text_node(document, data):
    for node in iter_text_nodes(document.root):
        if node.data == data:
            return node
    raise AssertionError(f"No text node holds {data!r}")


# === Documents ===


@given("the document:")  # type: ignore[misc]
def step_given_document(context):
    """Parse the document from the step text."""
    context.markup = context.text
    context.document = HtmlDocument.from_string(context.text)


@when("the document is reloaded")  # type: ignore[misc]
def step_when_reloaded(context):
    """Parse the same markup again, discarding the live selection."""
    context.document = HtmlDocument.from_string(context.markup)


@when("the document is replaced by:")  # type: ignore[misc]
def step_when_replaced(context):
    """Parse an edited version of the document."""
    context.markup = context.text
    context.document = HtmlDocument.from_string(context.text)


@when('the "{tag}" containing "{text}" is removed')  # type: ignore[misc]
def step_when_removed(context, tag, text):
    """Remove an element from the tree."""
    element = _element_containing(context.document, tag, text)
    element.getparent().remove(element)


# === Selecting and capturing ===


@when('I select "{phrase}"')  # type: ignore[misc]
def step_when_select_phrase(context, phrase):
    """Select the first occurrence of a phrase."""
    found = context.document.find_text(phrase)
    assert found is not None, f"{phrase!r} not in document"
    context.document.select(found.anchor, found.focus)


@when('I select from offset {start:d} of "{anchor}" to offset {end:d} of "{focus}"')  # type: ignore[misc]
def step_when_select_offsets(context, start, anchor, end, focus):
    """Select between points inside two text nodes."""
    document = context.document
    document.select(
        TextPoint(_text_node(document, anchor), start),
        TextPoint(_text_node(document, focus), end),
    )


@when("I capture the selection")  # type: ignore[misc]
def step_when_capture(context):
    """Wrap the live selection into a record."""
    context.record = wrap_selection(context.document)
    assert context.record is not None, "Nothing was captured"


@when("I relocate the selection")  # type: ignore[misc]
def step_when_relocate(context):
    """Relocate the stored record in the current document."""
    context.document.clear_selection()
    context.result = SelectionResolver(context.document).relocate(context.record)


@when('I resolve the simplest path of the "{tag}" containing "{text}"')  # type: ignore[misc]
def step_when_resolve_path(context, tag, text):
    """Resolve the minimal selector for an element."""
    context.element = _element_containing(context.document, tag, text)
    context.path = PathResolver(context.document).simplest_path(context.element)


# === Assertions ===


@then('the phrase is "{phrase}"')  # type: ignore[misc]
def step_then_phrase(context, phrase):
    assert context.record.phrase == phrase, f"Got {context.record.phrase!r}"


@then('the text before is "{before}"')  # type: ignore[misc]
def step_then_before(context, before):
    assert context.record.before == before, f"Got {context.record.before!r}"


@then('the text after is "{after}"')  # type: ignore[misc]
def step_then_after(context, after):
    assert context.record.after == after, f"Got {context.record.after!r}"


@then('the stored selector matches the "{tag}" containing "{text}"')  # type: ignore[misc]
def step_then_selector_matches(context, tag, text):
    """Assert the stored selector addresses the expected element."""
    element = _element_containing(context.document, tag, text)
    matches = context.document.find_all(context.record.selection.path)
    assert element in matches, f"{context.record.selection.path} misses <{tag}>"


@then("the selection is relocated")  # type: ignore[misc]
def step_then_relocated(context):
    assert context.result.selected, f"Expected selected but got {context.result.status}"


@then('the relocation status is "{status}"')  # type: ignore[misc]
def step_then_status(context, status):
    assert context.result.status.value == status, (
        f"Expected {status} but got {context.result.status.value}"
    )


@then('the live selection reads "{text}"')  # type: ignore[misc]
def step_then_live_selection(context, text):
    selection = context.document.selection
    assert selection is not None, "Nothing is selected"
    assert selection.to_string() == text, f"Got {selection.to_string()!r}"


@then("the live selection is empty")  # type: ignore[misc]
def step_then_no_live_selection(context):
    assert context.document.selection is None


@then('the selection is inside "{tag}" number {position:d}')  # type: ignore[misc]
def step_then_inside(context, tag, position):
    """Assert the relocated selection starts inside the n-th matching element."""
    expected = context.document.find_all(tag)[position - 1]
    anchor = context.document.selection.anchor
    assert anchor.node.parent is expected, f"Selection is not in {tag} #{position}"


@then("no element holds the selection")  # type: ignore[misc]
def step_then_not_found(context):
    assert find_selection(context.document, context.record) is None


@then("highlighting the selection fails")  # type: ignore[misc]
def step_then_highlight_fails(context):
    assert highlight_selection(context.document, context.record) is False


@then('the path is "{path}"')  # type: ignore[misc]
def step_then_path(context, path):
    assert context.path == path, f"Expected {path!r} but got {context.path!r}"


@then("the path matches exactly {count:d} element")  # type: ignore[misc]
def step_then_path_count(context, count):
    matches = context.document.find_all(context.path)
    assert len(matches) == count, f"Expected {count} matches but got {len(matches)}"
    assert context.element in matches
