"""
Shared fixtures. Run from the project root: python -m pytest tests/ -v
"""
import pytest

from crossfile.parsing.ir import SourceFile


def make_files(mapping, language="ts"):
    """{path: content} -> list[SourceFile] with one language tag."""
    return [SourceFile(path=p, content=c, language=language) for p, c in mapping.items()]


@pytest.fixture
def cycle_pair():
    return make_files({"a.ts": 'import "./b"', "b.ts": 'import "./a"'})


@pytest.fixture
def small_project():
    return make_files({
        "src/index.ts": (
            "import { greet } from './greet'\n"
            "import { unusedThing } from './helpers'\n"
            "greet('world')\n"
        ),
        "src/greet.ts": (
            "export function greet(name: string) {\n"
            "  console.log('hello ' + name)\n"
            "}\n"
        ),
        "src/helpers.ts": (
            "import './missing'\n"
            "export const unusedThing = 1\n"
        ),
        "src/orphan.ts": "export const lonely = 2\n",
    })


@pytest.fixture
def duplicated_block():
    return "\n".join([
        "function computeTotals(items) {",
        "  let total = 0;",
        "  for (const item of items) { total += item.price * item.quantity; }",
        "  return total;",
        "}",
    ])


@pytest.fixture
def files_of():
    return make_files
