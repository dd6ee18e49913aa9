from __future__ import annotations

from src.driver.steps import accepts_continuation, default_error_handler


def test_accepts_continuation_counts_positional_parameters() -> None:
    def one(error) -> None: ...

    def two(error, proceed) -> None: ...

    def many(*args) -> None: ...

    def keyword_only(error, *, proceed=None) -> None: ...

    assert not accepts_continuation(one)
    assert accepts_continuation(two)
    assert accepts_continuation(many)
    assert not accepts_continuation(keyword_only)
    assert accepts_continuation(default_error_handler)


def test_accepts_continuation_on_bound_methods_and_builtins() -> None:
    class Handler:
        def __call__(self, error, proceed) -> None: ...

        def log(self, error) -> None: ...

    assert accepts_continuation(Handler())
    assert not accepts_continuation(Handler().log)
    assert not accepts_continuation([].append)
