"""Future 工具模块

基于 concurrent.futures.Future 的组合函数：结果映射、构造已完成/已失败的 Future、
以及为 Future 设置截止时间。传输层返回的都是这种 Future。
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import CancelledError, Future, InvalidStateError
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def completed_future(value: T) -> Future[T]:
    """返回一个已成功完成的 Future"""
    future: Future[T] = Future()
    future.set_result(value)
    return future


def failed_future(error: BaseException) -> Future[Any]:
    """返回一个已失败的 Future"""
    future: Future[Any] = Future()
    future.set_exception(error)
    return future


def _settle(target: Future, result: Any = None, error: BaseException | None = None) -> bool:
    """
    尝试完成目标 Future，目标已完成时忽略

    返回:
        是否由本次调用完成了目标
    """
    try:
        if error is not None:
            target.set_exception(error)
        else:
            target.set_result(result)
    except InvalidStateError:
        return False
    return True


def transfer(source: Future, target: Future) -> None:
    """在 source 完成后，把结果或异常转交给 target"""

    def _done(f: Future) -> None:
        if f.cancelled():
            _settle(target, error=CancelledError())
            return
        error = f.exception()
        if error is not None:
            _settle(target, error=error)
        else:
            _settle(target, f.result())

    source.add_done_callback(_done)


def map_future(future: Future[T], fn: Callable[[T], R]) -> Future[R]:
    """
    对 Future 的成功结果应用 fn，返回新的 Future

    source 失败时原样传递异常；fn 本身抛出的异常会使新 Future 失败
    """
    mapped: Future[R] = Future()

    def _done(f: Future[T]) -> None:
        if f.cancelled():
            _settle(mapped, error=CancelledError())
            return
        error = f.exception()
        if error is not None:
            _settle(mapped, error=error)
            return
        try:
            value = fn(f.result())
        except Exception as e:
            _settle(mapped, error=e)
        else:
            _settle(mapped, value)

    future.add_done_callback(_done)
    return mapped


def within(future: Future[T], seconds: float, error_factory: Callable[[], BaseException]) -> Future[T]:
    """
    为 Future 设置截止时间

    返回一个新的 Future：source 在 seconds 内完成则转交其结果，
    否则以 error_factory() 生成的异常失败。超时后不会取消 source。
    """
    bounded: Future[T] = Future()

    def _expire() -> None:
        if _settle(bounded, error=error_factory()):
            logger.debug(f"Future expired after {seconds}s")

    timer = threading.Timer(seconds, _expire)
    timer.daemon = True

    def _done(f: Future[T]) -> None:
        timer.cancel()

    future.add_done_callback(_done)
    transfer(future, bounded)
    if not future.done():
        timer.start()
    return bounded
