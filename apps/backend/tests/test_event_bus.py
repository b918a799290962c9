import sys
import unittest
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from agentsim.simulator.events import EventBus
from agentsim.simulator.state import SimulationEvent


def _event(n: int, event_type: str = "step_start", execution_id: str = "exec-1", agent_id: str = "agent-1"):
    return SimulationEvent(
        id=f"event-{n}",
        type=event_type,
        workflow_execution_id=execution_id,
        agent_id=agent_id,
        message=f"event {n}",
    )


class EventBusTests(unittest.TestCase):
    def test_handlers_called_in_subscription_order(self):
        bus = EventBus()
        calls = []
        bus.subscribe(lambda e: calls.append(("first", e.id)))
        bus.subscribe(lambda e: calls.append(("second", e.id)))

        bus.publish(_event(1))

        self.assertEqual(calls, [("first", "event-1"), ("second", "event-1")])

    def test_filters_by_type_execution_and_agent(self):
        bus = EventBus()
        by_type, by_execution, by_agent = [], [], []
        bus.subscribe(by_type.append, event_types=["workflow_complete"])
        bus.subscribe(by_execution.append, execution_id="exec-2")
        bus.subscribe(by_agent.append, agent_id="agent-2")

        bus.publish(_event(1))
        bus.publish(_event(2, "workflow_complete"))
        bus.publish(_event(3, execution_id="exec-2"))
        bus.publish(_event(4, agent_id="agent-2"))

        self.assertEqual([e.id for e in by_type], ["event-2"])
        self.assertEqual([e.id for e in by_execution], ["event-3"])
        self.assertEqual([e.id for e in by_agent], ["event-4"])

    def test_unsubscribe_stops_delivery(self):
        bus = EventBus()
        received = []
        sub_id = bus.subscribe(received.append)

        self.assertTrue(bus.unsubscribe(sub_id))
        self.assertFalse(bus.unsubscribe(sub_id))
        bus.publish(_event(1))

        self.assertEqual(received, [])
        self.assertEqual(bus.subscriber_count, 0)

    def test_subscription_ids_are_unique(self):
        bus = EventBus()
        ids = {bus.subscribe(lambda e: None) for _ in range(5)}
        self.assertEqual(len(ids), 5)

    def test_failing_handler_is_isolated(self):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(broken)
        bus.subscribe(received.append)

        with self.assertLogs("agentsim.simulator.events", level="ERROR") as logs:
            bus.publish(_event(1))

        self.assertEqual([e.id for e in received], ["event-1"])
        self.assertIn("event-1", logs.output[0])

    def test_handler_may_unsubscribe_during_publish(self):
        bus = EventBus()
        received = []
        holder = {}

        def once(event):
            received.append(event.id)
            bus.unsubscribe(holder["id"])

        holder["id"] = bus.subscribe(once)
        bus.publish(_event(1))
        bus.publish(_event(2))

        self.assertEqual(received, ["event-1"])

    def test_history_is_capped_and_oldest_first(self):
        bus = EventBus(max_history=3)
        for n in range(5):
            bus.publish(_event(n))

        self.assertEqual([e.id for e in bus.history()], ["event-2", "event-3", "event-4"])
        self.assertEqual([e.id for e in bus.history(2)], ["event-3", "event-4"])
        self.assertEqual(bus.history(0), [])

        bus.clear()
        self.assertEqual(bus.history(), [])

    def test_zero_history_keeps_nothing_but_still_delivers(self):
        bus = EventBus(max_history=0)
        received = []
        bus.subscribe(received.append)

        for n in range(5):
            bus.publish(_event(n))

        self.assertEqual(bus.history(), [])
        self.assertEqual(len(received), 5)


if __name__ == "__main__":
    unittest.main()
