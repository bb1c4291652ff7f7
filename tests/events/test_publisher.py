import logging

import pytest
import requests

from pgtask.events.models import EVENT_TOPIC_CLUSTER, delete_cluster_event
from pgtask.events.notify import notify_delete_cluster
from pgtask.events.publisher import NsqPublisher, NullPublisher
from pgtask.task.errors import NotificationError

from conftest import FakePublisher


class FakeResponse:
    def __init__(self, status=200):
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code}")


class FakeSession:
    def __init__(self, response=None, error=None):
        self.posts = []
        self.response = response or FakeResponse()
        self.error = error

    def post(self, url, params=None, json=None, timeout=None):
        self.posts.append((url, params, json))
        if self.error:
            raise self.error
        return self.response


def _event():
    return delete_cluster_event(cluster_name="c1", cluster_identifier="id-1", username="bob", namespace="pgo")


def test_event_fields():
    ev = _event()
    assert ev.topic == (EVENT_TOPIC_CLUSTER,)
    assert ev.event_type == "DeleteCluster"
    assert ev.timestamp.endswith("Z")
    d = ev.dict()
    assert d["topic"] == ["clustertopic"]
    assert d["clustername"] == "c1"
    assert d["username"] == "bob"


def test_nsq_publisher_posts_per_topic():
    session = FakeSession()
    NsqPublisher("nsq:4151", session=session).publish(_event())
    (url, params, body), = session.posts
    assert url == "http://nsq:4151/pub"
    assert params == {"topic": "clustertopic"}
    assert body["event_type"] == "DeleteCluster"


@pytest.mark.parametrize("session", [
    FakeSession(error=requests.ConnectionError("refused")),
    FakeSession(response=FakeResponse(500)),
])
def test_nsq_failures_raise_notification_error(session):
    with pytest.raises(NotificationError):
        NsqPublisher("nsq:4151", session=session).publish(_event())


def test_null_publisher_accepts_anything():
    NullPublisher().publish(_event())


def test_notify_swallows_failures(caplog):
    logger = logging.getLogger("tests.notify")
    with caplog.at_level(logging.ERROR, logger="tests.notify"):
        ok = notify_delete_cluster(
            FakePublisher(error=NotificationError("down")),
            cluster_name="c1", cluster_identifier="", username="", namespace="pgo", logger=logger,
        )
    assert ok is False
    assert "c1" in caplog.text


def test_notify_success():
    pub = FakePublisher()
    assert notify_delete_cluster(pub, cluster_name="c1", cluster_identifier="x", username="u", namespace="pgo")
    assert pub.events[0].cluster_identifier == "x"
