"""
Unit tests for MiddlewareChain registration and dispatch.
"""

import logging

import pytest

from middlechain.http import HTTPStatus, Request, Response
from middlechain.middleware import (
    FunctionMiddleware,
    Middleware,
    MiddlewareChain,
    function_middleware,
)


def set_header(name: str, value: str, log: list):
    def handler(request, response, next):
        log.append("setHeader")
        response.headers[name] = value
        next()
    return handler


def set_status(status: int, log: list = None):
    def handler(request, response, next):
        if log is not None:
            log.append("setStatus")
        response.status = status
        next()
    return handler


def append_log(log: list):
    def handler(request, response, next):
        log.append("appendLog")
        next()
    return handler


def auth_check(request, response, next):
    """Rejects without touching the status when the Auth header is absent."""
    if "Auth" not in request.headers:
        return
    next()


class TestRegistration:
    """Tests for MiddlewareChain.use / register."""

    def test_new_chain_is_empty(self, chain: MiddlewareChain):
        """A fresh chain has no handlers."""
        assert len(chain) == 0
        assert list(chain) == []

    def test_use_appends_in_order(self, chain: MiddlewareChain, recorder):
        """Handlers are kept in registration order."""
        a, b, c = recorder("a"), recorder("b"), recorder("c")
        chain.use(a)
        chain.use(b)
        chain.use(c)

        assert list(chain) == [a, b, c]

    def test_use_returns_none(self, chain: MiddlewareChain, recorder):
        """Registration is a pure append with no return value."""
        assert chain.use(recorder("a")) is None

    def test_register_alias(self, chain: MiddlewareChain, recorder):
        """register() is the same operation as use()."""
        chain.register(recorder("a"))
        assert len(chain) == 1

    def test_duplicates_allowed(self, chain, recorder, log, request_, response):
        """The same handler may be registered twice and runs twice."""
        a = recorder("a")
        chain.use(a)
        chain.use(a)

        chain.handle(request_, response)

        assert len(chain) == 2
        assert log == ["a", "a"]

    def test_accepts_non_continuing_handler(self, chain: MiddlewareChain):
        """Registration never inspects the handler."""
        chain.use(lambda request, response, next: None)
        assert len(chain) == 1


class TestDispatch:
    """Tests for MiddlewareChain.handle / dispatch."""

    def test_empty_chain_leaves_response_unchanged(self, chain, request_, response):
        """Dispatching an empty chain is a no-op."""
        chain.handle(request_, response)

        assert response == Response()

    def test_all_handlers_run_once_in_order(self, chain, recorder, log, request_, response):
        """N continuing handlers all run exactly once, in order."""
        for name in ["a", "b", "c", "d", "e"]:
            chain.use(recorder(name))

        chain.handle(request_, response)

        assert log == ["a", "b", "c", "d", "e"]

    @pytest.mark.parametrize("stop_at", [0, 1, 2, 3])
    def test_short_circuit_stops_downstream(self, chain, log, request_, response, stop_at):
        """Handlers after the one that skips next() never run."""
        for i in range(4):
            def handler(request, response, next, i=i):
                log.append(i)
                if i != stop_at:
                    next()
            chain.use(handler)

        chain.handle(request_, response)

        assert log == list(range(stop_at + 1))

    def test_post_continuation_sees_downstream_mutations(self, chain, request_, response):
        """Code after next() observes what later handlers wrote."""
        observed = {}

        def outer(request, response, next):
            response.headers["X-Outer"] = "1"
            next()
            observed["status"] = response.status
            observed["inner_header"] = response.headers.get("X-Inner")

        def inner(request, response, next):
            response.status = HTTPStatus.NOT_FOUND
            response.headers["X-Inner"] = "2"
            next()

        chain.use(outer)
        chain.use(inner)
        chain.handle(request_, response)

        assert observed == {"status": 404, "inner_header": "2"}
        assert response.headers["X-Outer"] == "1"

    def test_wrap_order_before_and_after(self, chain, log, request_, response):
        """Pre-work runs in registration order, post-work in reverse."""
        def wrap(name):
            def handler(request, response, next):
                log.append(f"{name}:before")
                next()
                log.append(f"{name}:after")
            return handler

        chain.use(wrap("a"))
        chain.use(wrap("b"))
        chain.use(wrap("c"))
        chain.handle(request_, response)

        assert log == [
            "a:before", "b:before", "c:before",
            "c:after", "b:after", "a:after",
        ]

    def test_same_instances_shared(self, chain, request_, response):
        """Every handler receives the caller's request and response objects."""
        seen = []

        def handler(request, response, next):
            seen.append((request, response))
            next()

        chain.use(handler)
        chain.use(handler)
        chain.handle(request_, response)

        assert all(req is request_ and res is response for req, res in seen)

    def test_request_mutation_visible_downstream(self, chain, request_, response):
        """A handler can pass data along by mutating the request."""
        def tag(request, response, next):
            request.headers["X-User"] = "alice"
            next()

        def read(request, response, next):
            response.body = request.headers["X-User"]

        chain.use(tag)
        chain.use(read)
        chain.handle(request_, response)

        assert response.body == "alice"
        assert request_.headers["X-User"] == "alice"

    def test_dispatch_alias_returns_none(self, chain, recorder, request_, response):
        """dispatch() is handle() and produces no value."""
        chain.use(recorder("a"))
        assert chain.dispatch(request_, response) is None

    def test_repeated_dispatch_is_independent(self, chain):
        """Two dispatches with fresh pairs do not interfere."""
        def count(request, response, next):
            response.headers["X-Count"] = str(int(response.headers.get("X-Count", "0")) + 1)
            next()

        def echo_path(request, response, next):
            response.body = request.path

        chain.use(count)
        chain.use(echo_path)

        first = Response()
        second = Response()
        chain.handle(Request(path="/one"), first)
        chain.handle(Request(path="/two"), second)

        assert first.headers["X-Count"] == "1"
        assert second.headers["X-Count"] == "1"
        assert first.body == "/one"
        assert second.body == "/two"

    def test_short_circuit_does_not_stick(self, chain, log):
        """A short-circuit in one dispatch does not affect the next one."""
        chain.use(auth_check)
        chain.use(append_log(log))

        chain.handle(Request(), Response())
        chain.handle(Request(headers={"Auth": "x"}), Response())

        assert log == ["appendLog"]

    def test_calling_next_twice_reruns_tail(self, chain, log, recorder, request_, response):
        """Each next() call re-executes the rest of the chain."""
        def twice(request, response, next):
            log.append("twice")
            next()
            next()

        chain.use(twice)
        chain.use(recorder("b"))
        chain.use(recorder("c"))
        chain.handle(request_, response)

        assert log == ["twice", "b", "c", "b", "c"]

    def test_registration_during_dispatch_applies_next_time(self, chain, log, recorder):
        """A handler added mid-dispatch only runs from the following dispatch."""
        late = recorder("late")

        def adder(request, response, next):
            log.append("adder")
            if len(chain) == 1:
                chain.use(late)
            next()

        chain.use(adder)

        chain.handle(Request(), Response())
        assert log == ["adder"]
        assert len(chain) == 2

        chain.handle(Request(), Response())
        assert log == ["adder", "adder", "late"]


class TestErrorPropagation:
    """Handler exceptions pass through the chain untouched."""

    def test_exception_propagates_unchanged(self, chain, log, recorder, request_, response):
        """The original exception reaches the caller and downstream never runs."""
        boom = ValueError("boom")

        def raiser(request, response, next):
            response.status = HTTPStatus.BAD_REQUEST
            raise boom

        chain.use(recorder("a"))
        chain.use(raiser)
        chain.use(recorder("never"))

        with pytest.raises(ValueError) as exc_info:
            chain.handle(request_, response)

        assert exc_info.value is boom
        assert log == ["a"]
        # Partial state is left as the failing handler wrote it
        assert response.status == 400

    def test_exception_skips_upstream_post_work(self, chain, log, request_, response):
        """Post-next() code in outer handlers does not run when inner raises."""
        def outer(request, response, next):
            next()
            log.append("outer:after")

        def inner(request, response, next):
            raise RuntimeError("fail")

        chain.use(outer)
        chain.use(inner)

        with pytest.raises(RuntimeError):
            chain.handle(request_, response)

        assert log == []

    def test_exception_logged_at_debug(self, chain, request_, response, caplog):
        """Dispatch logs the aborted request once before re-raising."""
        def raiser(request, response, next):
            raise KeyError("missing")

        chain.use(raiser)

        with caplog.at_level(logging.DEBUG, logger="middlechain"):
            with pytest.raises(KeyError):
                chain.handle(request_, response)

        aborted = [r for r in caplog.records if "aborted" in r.getMessage()]
        assert len(aborted) == 1
        assert "KeyError" in aborted[0].getMessage()


class TestScenarios:
    """End-to-end chains built from small handlers."""

    def test_header_status_log_scenario(self, chain, log, request_, response):
        """[setHeader, setStatus(404), appendLog] -> X=1, 404, three log entries."""
        chain.use(set_header("X", "1", log))
        chain.use(set_status(404, log))
        chain.use(append_log(log))

        chain.handle(request_, response)

        assert response.headers == {"X": "1"}
        assert response.status == 404
        assert log == ["setHeader", "setStatus", "appendLog"]

    def test_auth_check_without_header_keeps_default_status(self, chain, response):
        """authCheck stops the chain, so setStatus(200) never runs."""
        touched = []

        def set_ok(request, response, next):
            touched.append(True)
            response.status = 200
            next()

        chain.use(auth_check)
        chain.use(set_ok)

        response.status = 299  # sentinel to prove nothing wrote 200
        chain.handle(Request(), response)

        assert touched == []
        assert response.status == 299

    def test_auth_check_with_header_continues(self, chain):
        """With the Auth header present the next handler runs."""
        chain.use(auth_check)
        chain.use(set_status(201))

        response = Response()
        chain.handle(Request(headers={"Auth": "token"}), response)

        assert response.status == 201


class TestClassMiddleware:
    """Tests for Middleware subclasses and FunctionMiddleware."""

    def test_subclass_is_a_handler(self, chain, request_, response):
        """A Middleware subclass is registered and called like a function."""
        class AddServer(Middleware):
            def __call__(self, request, response, next):
                next()
                response.set_header("Server", "middlechain")

        chain.use(AddServer())
        chain.handle(request_, response)

        assert response.headers["Server"] == "middlechain"
        assert AddServer().name == "AddServer"

    def test_abstract_base_cannot_be_instantiated(self):
        """Middleware requires __call__."""
        with pytest.raises(TypeError):
            Middleware()

    def test_function_middleware_name(self):
        """FunctionMiddleware uses the function name unless given one."""
        def check_token(request, response, next):
            next()

        assert FunctionMiddleware(check_token).name == "check_token"
        assert FunctionMiddleware(check_token, name="auth").name == "auth"

    def test_function_middleware_decorator(self, chain, request_, response):
        """The decorator produces a working, named handler."""
        @function_middleware
        def add_header(request, response, next):
            response.set_header("X-Custom", "value")
            next()

        chain.use(add_header)
        chain.handle(request_, response)

        assert isinstance(add_header, FunctionMiddleware)
        assert add_header.name == "add_header"
        assert response.headers["X-Custom"] == "value"

    def test_registration_logged_with_name(self, chain, caplog):
        """use() logs the handler name at DEBUG."""
        @function_middleware
        def named(request, response, next):
            next()

        with caplog.at_level(logging.DEBUG, logger="middlechain"):
            chain.use(named)

        assert any("named" in r.getMessage() for r in caplog.records)
