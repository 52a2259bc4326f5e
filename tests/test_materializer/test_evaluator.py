"""Tests for inclusion decisions (treeforge.materializer.evaluator).

Covers:
- evaluate() for every condition variant
- is_included() conjunction and short-circuiting
- File inclusion for the naming examples of the electron templates
- Directory inclusion with the single trailing condition form
"""

from __future__ import annotations

import itertools

import pytest

from treeforge.config import SelectionContext, Vocabulary
from treeforge.materializer.evaluator import (
    evaluate,
    is_included,
    should_include_directory,
    should_include_file,
)
from treeforge.materializer.grammar import (
    Conjunction,
    FrameworkEq,
    FrameworkOption,
    Inert,
    Negated,
    OptionIn,
)

FRAMEWORKS = ("vanilla", "vue", "react", "svelte", "solid")
OPTIONS = ("pug", "tailwindcss", "scss", "sass")


pytestmark = pytest.mark.unit


def _all_selections():
    for framework in FRAMEWORKS:
        for size in range(len(OPTIONS) + 1):
            for options in itertools.combinations(OPTIONS, size):
                yield SelectionContext.of(framework, options)


# ---------------------------------------------------------------------------
# evaluate
# ---------------------------------------------------------------------------


class TestEvaluate:
    def test_inert_always_true(self, select):
        assert evaluate(Inert("tsx"), select("vue"))

    def test_negated_excludes_active_framework(self, select):
        assert not evaluate(Negated("vue"), select("vue"))
        assert evaluate(Negated("vue"), select("react"))

    def test_negated_excludes_active_option(self, select):
        assert not evaluate(Negated("pug"), select("react", "pug"))
        assert evaluate(Negated("pug"), select("react", "scss"))

    @pytest.mark.parametrize("token", ["vue", "pug", "react", "scss", "unknown"])
    def test_negated_matches_definition(self, token):
        for selection in _all_selections():
            expected = not (token == selection.framework or token in selection.options)
            assert evaluate(Negated(token), selection) is expected

    def test_conjunction_framework_and_option(self, select):
        cond = Conjunction(("vue", "tailwindcss"))
        assert evaluate(cond, select("vue", "tailwindcss"))
        assert not evaluate(cond, select("vue"))
        assert not evaluate(cond, select("react", "tailwindcss"))

    def test_conjunction_of_options(self, select):
        cond = Conjunction(("scss", "tailwindcss"))
        assert evaluate(cond, select("vanilla", "scss", "tailwindcss", "pug"))
        assert not evaluate(cond, select("vanilla", "scss"))

    def test_conjunction_matches_definition(self):
        cond = Conjunction(("react", "pug"))
        for selection in _all_selections():
            expected = selection.framework == "react" and "pug" in selection.options
            assert evaluate(cond, selection) is expected

    def test_framework_option(self, select):
        cond = FrameworkOption("react", "pug")
        assert evaluate(cond, select("react", "pug"))
        assert not evaluate(cond, select("react"))
        assert not evaluate(cond, select("solid", "pug"))

    def test_framework_eq(self, select):
        assert evaluate(FrameworkEq("svelte"), select("svelte"))
        assert not evaluate(FrameworkEq("svelte"), select("solid"))

    def test_option_in(self, select):
        assert evaluate(OptionIn("sass"), select("vue", "sass"))
        assert not evaluate(OptionIn("sass"), select("vue", "scss"))

    def test_unknown_condition_type(self, select):
        with pytest.raises(TypeError):
            evaluate("vue", select("vue"))  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# is_included
# ---------------------------------------------------------------------------


class TestIsIncluded:
    def test_empty_conditions_always_included(self):
        for selection in _all_selections():
            assert is_included([], selection)

    def test_all_conditions_must_hold(self, select):
        conditions = [FrameworkEq("vue"), OptionIn("pug")]
        assert is_included(conditions, select("vue", "pug"))
        assert not is_included(conditions, select("vue"))

    def test_short_circuits_on_first_failure(self, select):
        seen = []

        def conditions():
            for cond in (FrameworkEq("react"), OptionIn("pug")):
                seen.append(cond)
                yield cond

        assert not is_included(conditions(), select("vue", "pug"))
        assert seen == [FrameworkEq("react")]


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


class TestShouldIncludeFile:
    @pytest.mark.parametrize(
        "name",
        ["index.ts", "README.md.j2", "logo.svg", "Makefile", ".gitignore", "vite.config.ts.j2"],
    )
    def test_names_without_conditions_always_included(self, vocabulary, name):
        for selection in _all_selections():
            assert should_include_file(name, selection, vocabulary)

    def test_react_pug_selection(self, vocabulary, select):
        selection = select("react", "pug")
        names = [
            "Home.react-pug.tsx.j2",
            "Home.vue-pug.vue.j2",
            "Home.solid-pug.tsx.j2",
            "Home.react.tsx.j2",
            "Home.pug.vue.j2",
        ]
        included = {n for n in names if should_include_file(n, selection, vocabulary)}
        assert included == {"Home.react-pug.tsx.j2", "Home.react.tsx.j2", "Home.pug.vue.j2"}

    def test_react_pug_selection_with_ejs_marker(self, select):
        vocab = Vocabulary(frameworks=FRAMEWORKS, options=OPTIONS, render_marker="ejs")
        names = [
            "Home.react-pug.tsx.ejs",
            "Home.vue-pug.vue.ejs",
            "Home.solid-pug.tsx.ejs",
            "Home.react.tsx.ejs",
            "Home.pug.vue.ejs",
        ]
        included = [n for n in names if should_include_file(n, select("react", "pug"), vocab)]
        assert included == ["Home.react-pug.tsx.ejs", "Home.react.tsx.ejs", "Home.pug.vue.ejs"]
        assert not should_include_file("App.vue.vue.ejs", select("react"), vocab)
        assert not should_include_file("App.!vue.tsx.ejs", select("vue"), vocab)

    def test_negated_active_framework_excluded(self, vocabulary, select):
        assert not should_include_file("App.!vue.tsx.j2", select("vue"), vocabulary)
        assert should_include_file("App.!vue.tsx.j2", select("react"), vocabulary)

    def test_vue_component_excluded_for_other_frameworks(self, vocabulary, select):
        assert not should_include_file("App.vue.vue.j2", select("react"), vocabulary)
        assert should_include_file("App.vue.vue.j2", select("vue"), vocabulary)

    def test_framework_matrix(self, vocabulary):
        names = {
            "App.vue.vue.j2": "vue",
            "App.react.tsx.j2": "react",
            "App.vanilla.ts.j2": "vanilla",
            "App.solid.tsx.j2": "solid",
            "App.svelte.svelte.j2": "svelte",
        }
        for framework in FRAMEWORKS:
            selection = SelectionContext.of(framework, ["tailwindcss"])
            included = {n for n in names if should_include_file(n, selection, vocabulary)}
            assert included == {n for n, fw in names.items() if fw == framework}

    def test_conjunction_file(self, vocabulary, select):
        name = "Component.vue+tailwindcss.vue.j2"
        assert should_include_file(name, select("vue", "tailwindcss"), vocabulary)
        assert not should_include_file(name, select("vue"), vocabulary)
        assert not should_include_file(name, select("react", "tailwindcss"), vocabulary)

    def test_multiple_segments_are_anded(self, vocabulary, select):
        name = "Home.vue.!pug.vue.j2"
        assert should_include_file(name, select("vue"), vocabulary)
        assert not should_include_file(name, select("vue", "pug"), vocabulary)
        assert not should_include_file(name, select("react"), vocabulary)

    def test_option_file_with_matching_extension(self, vocabulary, select):
        assert should_include_file("variables.scss.scss", select("vanilla", "scss"), vocabulary)
        assert not should_include_file("variables.scss.scss", select("vanilla"), vocabulary)

    def test_unknown_tokens_never_exclude(self, vocabulary, select):
        assert should_include_file("button.module.css", select("react"), vocabulary)
        assert should_include_file("types.d.ts", select("vue"), vocabulary)


# ---------------------------------------------------------------------------
# Directories
# ---------------------------------------------------------------------------


class TestShouldIncludeDirectory:
    def test_negated_directory(self, vocabulary):
        for selection in _all_selections():
            expected = selection.framework != "vue"
            assert should_include_directory("state.!vue", selection, vocabulary) is expected

    def test_plain_directory(self, vocabulary, select):
        assert should_include_directory("src", select("vue"), vocabulary)

    def test_framework_directory(self, vocabulary, select):
        assert should_include_directory("stores.vue", select("vue"), vocabulary)
        assert not should_include_directory("stores.vue", select("solid"), vocabulary)

    def test_option_directory(self, vocabulary, select):
        assert should_include_directory("styles.tailwindcss", select("vue", "tailwindcss"), vocabulary)
        assert not should_include_directory("styles.tailwindcss", select("vue"), vocabulary)

    def test_negated_option_directory(self, vocabulary, select):
        assert not should_include_directory("plain.!pug", select("react", "pug"), vocabulary)
        assert should_include_directory("plain.!pug", select("react"), vocabulary)
