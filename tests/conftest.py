import textwrap
from pathlib import Path

import pytest
from git import Actor, Repo


AUTHOR = Actor("Test Author", "author@example.com")


def php_class(namespace: str, name: str, body: str = "", extends: str = "") -> str:
    extends_clause = f" extends {extends}" if extends else ""
    lines = [
        "<?php",
        "",
        "declare(strict_types=1);",
        "",
        f"namespace Vendor\\BlogExample\\{namespace};",
        "",
        "/**",
        f" * {name}",
        " */",
        f"final class {name}{extends_clause}",
        "{",
    ]
    return "\n".join(lines) + "\n" + body + "}\n"


CONSTRUCTOR = "    public function __construct(private readonly PostRepository $postRepository)\n    {\n    }\n"


EXEMPLARY_FILES: dict[str, str] = {
    "composer.json": textwrap.dedent("""\
        {
            "name": "vendor/blog-example",
            "type": "typo3-cms-extension",
            "require-dev": {
                "phpunit/phpunit": "^10.5",
                "typo3/testing-framework": "^8.0"
            }
        }
        """),
    "ext_emconf.php": "<?php\n\n$EM_CONF[$_EXTKEY] = ['title' => 'Blog Example'];\n",
    "Classes/Controller/BlogController.php": php_class(
        "Controller", "BlogController", CONSTRUCTOR, "ActionController"
    ),
    "Classes/Domain/Model/Post.php": php_class("Domain\\Model", "Post", extends="AbstractEntity"),
    "Classes/Domain/Repository/PostRepository.php": php_class(
        "Domain\\Repository", "PostRepository", extends="Repository"
    ),
    "Configuration/Services.yaml": textwrap.dedent("""\
        services:
          _defaults:
            autowire: true
            autoconfigure: true
            public: false
        """),
    "Configuration/TCA/tx_blogexample_domain_model_post.php": "<?php\n\nreturn [];\n",
    "Resources/Private/Templates/Blog/List.html": "<f:layout name=\"Default\" />\n",
    "Resources/Public/Icons/Extension.svg": "<svg/>\n",
    "Tests/Unit/Controller/BlogControllerTest.php": "<?php\n",
    "Tests/Unit/Domain/Repository/PostRepositoryTest.php": "<?php\n",
    "Tests/Functional/Domain/Repository/PostRepositoryTest.php": "<?php\n",
    "Tests/Functional/Fixtures/Posts.csv": "\"tx_blogexample_domain_model_post\"\n",
    "Build/phpunit/UnitTests.xml": "<phpunit/>\n",
    "Build/phpunit/FunctionalTests.xml": "<phpunit/>\n",
    "Documentation/Index.rst": "=============\nBlog Example\n=============\n",
    "Documentation/guides.xml": "<guides theme=\"typo3docs\"><project title=\"Blog\"/></guides>\n",
    "README.md": "# Blog Example\n",
    "LICENSE": "GPL-2.0-or-later\n",
    ".editorconfig": "root = true\n",
    ".gitignore": "/vendor/\n/local.php\n",
    ".php-cs-fixer.dist.php": "<?php\n\nreturn new PhpCsFixer\\Config();\n",
    "phpstan.neon": "parameters:\n  level: 10\n",
    ".github/workflows/ci.yml": "on: push\n",
}


def write_tree(root: Path, files: dict[str, str]) -> Path:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def make_extension(tmp_path):
    """Build an extension tree: exemplary files plus overrides, None removes a file."""
    def factory(overrides: dict = None, name: str = "blog_example", exemplary: bool = True) -> Path:
        files = dict(EXEMPLARY_FILES) if exemplary else {}
        for relative, content in (overrides or {}).items():
            if content is None:
                files.pop(relative, None)
            else:
                files[relative] = content
        return write_tree(tmp_path / name, files)
    return factory


@pytest.fixture
def extension(make_extension) -> Path:
    return make_extension()


@pytest.fixture
def minimal_extension(make_extension) -> Path:
    return make_extension({"composer.json": "{}\n"}, name="minimal", exemplary=False)


def commit_all(repo: Repo, message: str = "Initial commit") -> None:
    repo.git.add(A=True)
    repo.index.commit(message, author=AUTHOR, committer=AUTHOR)


@pytest.fixture
def git_extension(extension) -> Path:
    repo = Repo.init(extension)
    commit_all(repo)
    return extension


REPORT_WITH_SUMMARY = textwrap.dedent("""\
    # TYPO3 Extension Conformance Report

    ## Summary

    | Category | Score | Status |
    |----------|-------|--------|

    ## 1. File Structure Conformance

    - ✅ composer.json present

    ---
    """)


@pytest.fixture
def report_file(tmp_path) -> Path:
    path = tmp_path / "report.md"
    path.write_text(REPORT_WITH_SUMMARY, encoding="utf-8")
    return path
