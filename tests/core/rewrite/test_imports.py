from __future__ import annotations

from refit.core.rewrite import GuardMarker, ImportBlock, InjectionStatus, inject_imports

GUARD = GuardMarker(r"defined\s*\(\s*['\"]_JEXEC['\"]\s*\)\s*or\s*die\s*;?\s*\n")
BLOCK = ImportBlock("use Joomla\\CMS", ("use Joomla\\CMS\\Factory;", "use Joomla\\CMS\\Language\\Text;"))
RENDERED = "\nuse Joomla\\CMS\\Factory;\nuse Joomla\\CMS\\Language\\Text;\n"


def test_injects_after_guard_line() -> None:
    content = "<?php\ndefined('_JEXEC') or die;\n$x = 1;\n"

    result = inject_imports(content, BLOCK, GUARD)

    assert result.status is InjectionStatus.INJECTED
    assert result.injected
    assert result.content == "<?php\ndefined('_JEXEC') or die;\n" + RENDERED + "$x = 1;\n"
    start, end = result.span
    assert result.content[start:end] == RENDERED


def test_already_present_is_untouched() -> None:
    content = "<?php\ndefined('_JEXEC') or die;\nuse Joomla\\CMS\\Factory;\n"

    result = inject_imports(content, BLOCK, GUARD)

    assert result.status is InjectionStatus.ALREADY_PRESENT
    assert result.content == content
    assert result.span is None


def test_missing_guard_reports_anchor_not_found() -> None:
    content = "<?php\n$x = JText::_('A');\n"

    result = inject_imports(content, BLOCK, GUARD)

    assert result.status is InjectionStatus.ANCHOR_NOT_FOUND
    assert not result.injected
    assert result.content == content


def test_injection_is_idempotent() -> None:
    content = "<?php\ndefined('_JEXEC') or die;\n?>\n<p>hi</p>\n"

    once = inject_imports(content, BLOCK, GUARD)
    twice = inject_imports(once.content, BLOCK, GUARD)

    assert twice.status is InjectionStatus.ALREADY_PRESENT
    assert twice.content == once.content
    assert once.content.count("use Joomla\\CMS\\Factory;") == 1


def test_first_guard_is_the_anchor() -> None:
    content = "<?php\ndefined('_JEXEC') or die;\necho 1;\ndefined('_JEXEC') or die;\necho 2;\n"

    result = inject_imports(content, BLOCK, GUARD)

    assert result.content.index(RENDERED) == len("<?php\ndefined('_JEXEC') or die;\n")


def test_status_values() -> None:
    assert InjectionStatus.INJECTED.value == "injected"
    assert InjectionStatus.ALREADY_PRESENT.value == "already-present"
    assert InjectionStatus.ANCHOR_NOT_FOUND.value == "anchor-not-found"
