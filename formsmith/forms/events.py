"""表单生命周期事件与订阅者.

表单在创建时挂载订阅者;绑定数据与提交时按事件名分派到订阅者方法.
默认订阅者将事件转发为 blinker 信号,宿主应用可直接 ``connect`` 监听.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from blinker import Namespace

from formsmith.utils.structlog_config import log_debug


class FormEvents(str, Enum):
    """表单生命周期事件名."""

    PRE_SET_DATA = "pre_set_data"
    POST_SET_DATA = "post_set_data"
    PRE_SUBMIT = "pre_submit"
    SUBMIT = "submit"
    POST_SUBMIT = "post_submit"


@dataclass(slots=True)
class FormEvent:
    """分派给订阅者的事件对象.

    Attributes:
        name: 事件名.
        form_name: 触发事件的表单名.
        data: 事件携带的数据,PRE_SUBMIT 阶段订阅者可以替换它.

    """

    name: FormEvents
    form_name: str
    data: object = None


class FormEventSubscriber(Protocol):
    """表单事件订阅者协议."""

    def subscribed_events(self) -> Mapping[FormEvents, str]:
        """返回 事件 -> 处理方法名 映射."""
        ...


form_signals = Namespace()
pre_set_data = form_signals.signal("formsmith.pre-set-data")
post_set_data = form_signals.signal("formsmith.post-set-data")
pre_submit = form_signals.signal("formsmith.pre-submit")
submit = form_signals.signal("formsmith.submit")
post_submit = form_signals.signal("formsmith.post-submit")

_SIGNALS = {
    FormEvents.PRE_SET_DATA: pre_set_data,
    FormEvents.POST_SET_DATA: post_set_data,
    FormEvents.PRE_SUBMIT: pre_submit,
    FormEvents.SUBMIT: submit,
    FormEvents.POST_SUBMIT: post_submit,
}


class FormLifecycleSubscriber:
    """默认订阅者: 记录事件并转发为 blinker 信号."""

    def subscribed_events(self) -> Mapping[FormEvents, str]:
        return {event: "on_event" for event in FormEvents}

    def on_event(self, event: FormEvent) -> None:
        """转发事件.

        信号 sender 为表单名,接收方通过关键字参数 ``event`` 获取事件对象.
        """
        log_debug("表单事件", module="forms", form_name=event.form_name, form_event=event.name.value)
        _SIGNALS[event.name].send(event.form_name, event=event)


def dispatch(subscribers: list[FormEventSubscriber], event: FormEvent) -> FormEvent:
    """按订阅声明依次调用订阅者方法,返回(可能被修改的)事件."""
    for subscriber in subscribers:
        handler_name = subscriber.subscribed_events().get(event.name)
        if handler_name:
            getattr(subscriber, handler_name)(event)
    return event


__all__ = [
    "FormEvent",
    "FormEventSubscriber",
    "FormEvents",
    "FormLifecycleSubscriber",
    "dispatch",
    "form_signals",
    "post_set_data",
    "post_submit",
    "pre_set_data",
    "pre_submit",
    "submit",
]
