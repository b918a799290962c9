import asyncio
import json
import random
import sys
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from agentsim import main
from agentsim.agents import AgentContext
from agentsim.simulator import SimulationEngine
from agentsim.workflow.definitions import SIMULATION_ACTIONS


class SimulatorApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self._old_context = main.context

        engine = SimulationEngine(
            step_delay_ms=(0, 0), actions=SIMULATION_ACTIONS, rng=random.Random(21)
        )
        main.context = AgentContext(engine, event_buffer_size=20)
        main.context.initialize()
        self.engine = engine
        self.client = TestClient(main.app)

    def tearDown(self) -> None:
        main.context.close()
        main.context = self._old_context

    @staticmethod
    def _read_sse(response) -> list[dict]:
        payload = ""
        for chunk in response.iter_text():
            payload += chunk

        events: list[dict] = []
        for line in payload.splitlines():
            line = line.strip()
            if line.startswith("data: "):
                events.append(json.loads(line[6:]))
        return events

    def _start(self, speed: float = 1.0):
        response = self.client.post("/api/simulation/start", json={"speed": speed})
        self.assertEqual(response.status_code, 200)
        return response.json()

    def _run_welcome(self) -> dict:
        response = self.client.post(
            "/api/executions",
            json={"agent_id": "welcome-agent", "workflow_id": "welcome-setup"},
        )
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()

    def test_health(self):
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")

    def test_registry_endpoints(self):
        agents = self.client.get("/api/agents").json()
        workflows = self.client.get("/api/workflows").json()

        self.assertEqual([a["id"] for a in agents], ["welcome-agent", "contribution-agent", "triage-agent"])
        self.assertTrue(all(a["status"] == "idle" for a in agents))
        self.assertEqual(
            [w["id"] for w in workflows], ["welcome-setup", "first-contribution", "smart-triage"]
        )
        self.assertEqual(workflows[0]["steps"][3]["type"], "human_approval")

    def test_run_state_controls(self):
        status = self._start(3)
        self.assertTrue(status["is_running"])
        self.assertEqual(status["simulation_speed"], 3)

        status = self.client.post("/api/simulation/pause").json()
        self.assertTrue(status["is_paused"])

        status = self.client.post("/api/simulation/resume").json()
        self.assertFalse(status["is_paused"])

        status = self.client.post("/api/simulation/reset").json()
        self.assertFalse(status["is_running"])
        self.assertEqual(status["simulation_speed"], 1.0)

    def test_start_rejects_non_positive_speed(self):
        response = self.client.post("/api/simulation/start", json={"speed": 0})
        self.assertEqual(response.status_code, 422)

    def test_execute_before_start_is_conflict(self):
        response = self.client.post(
            "/api/executions",
            json={"agent_id": "welcome-agent", "workflow_id": "welcome-setup"},
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(self.client.get("/api/executions").json(), [])

    def test_execute_unknown_agent_or_workflow_is_not_found(self):
        self._start()

        response = self.client.post(
            "/api/executions", json={"agent_id": "ghost", "workflow_id": "welcome-setup"}
        )
        self.assertEqual(response.status_code, 404)

        response = self.client.post(
            "/api/executions", json={"agent_id": "welcome-agent", "workflow_id": "ghost"}
        )
        self.assertEqual(response.status_code, 404)

    def test_execution_with_approval_round_trip(self):
        self._start()
        execution = self._run_welcome()

        self.assertEqual(execution["status"], "running")
        self.assertEqual(execution["steps"][3]["status"], "waiting_approval")
        self.assertEqual(len(self.client.get("/api/executions").json()), 1)

        busy = self.client.post(
            "/api/executions",
            json={"agent_id": "welcome-agent", "workflow_id": "welcome-setup"},
        )
        self.assertEqual(busy.status_code, 409)

        approvals = self.client.get("/api/approvals").json()
        self.assertEqual(len(approvals), 1)
        self.assertEqual(approvals[0]["step_id"], "welcome-4")

        response = self.client.post(
            f"/api/approvals/{approvals[0]['id']}/respond",
            json={"response": "approve", "comments": "Good match", "responder": "maintainer"},
        )
        self.assertEqual(response.status_code, 200)

        finished = self.client.get(f"/api/executions/{execution['id']}").json()
        self.assertEqual(finished["status"], "completed")
        self.assertEqual(finished["steps"][3]["approval_request"]["response_by"], "maintainer")
        self.assertEqual(self.client.get("/api/approvals").json(), [])

        again = self.client.post(
            f"/api/approvals/{approvals[0]['id']}/respond", json={"response": "approve"}
        )
        self.assertEqual(again.status_code, 404)

    def test_invalid_approval_response_is_rejected(self):
        self._start()
        self._run_welcome()
        approval_id = self.client.get("/api/approvals").json()[0]["id"]

        response = self.client.post(f"/api/approvals/{approval_id}/respond", json={"response": "maybe"})

        self.assertEqual(response.status_code, 422)
        self.assertEqual(len(self.client.get("/api/approvals").json()), 1)

    def test_execution_report(self):
        self._start()
        execution = self._run_welcome()
        approval_id = self.client.get("/api/approvals").json()[0]["id"]
        self.client.post(f"/api/approvals/{approval_id}/respond", json={"response": "reject"})

        report = self.client.get(f"/api/executions/{execution['id']}/report").json()
        self.assertEqual(report["status"], "failed")
        self.assertEqual(report["completed"], 3)
        self.assertEqual(report["failed"], 1)
        self.assertEqual(report["pending"], 3)

        markdown = self.client.get(
            f"/api/executions/{execution['id']}/report", params={"format": "markdown"}
        )
        self.assertEqual(markdown.status_code, 200)
        self.assertIn("# Execution Report: Welcome & Environment Setup", markdown.text)
        self.assertIn("Rejected by user", markdown.text)

        missing = self.client.get("/api/executions/exec-missing/report")
        self.assertEqual(missing.status_code, 404)

    def test_recent_events_and_reset(self):
        self._start()
        execution = self._run_welcome()

        events = self.client.get("/api/events", params={"limit": 3}).json()
        self.assertEqual(len(events), 3)
        self.assertEqual(events[0]["type"], "approval_requested")

        self.client.post("/api/simulation/reset")
        self.assertEqual(self.client.get("/api/events").json(), [])
        self.assertEqual(self.client.get(f"/api/executions/{execution['id']}").status_code, 404)
        agents = self.client.get("/api/agents").json()
        self.assertTrue(all(a["status"] == "idle" for a in agents))

    def test_event_stream_replays_backlog(self):
        self._start()
        self._run_welcome()
        expected = [e["id"] for e in reversed(self.client.get("/api/events", params={"limit": 3}).json())]

        with self.client.stream("GET", "/api/events/stream", params={"replay": 3, "max_events": 3}) as response:
            self.assertEqual(response.status_code, 200)
            self.assertTrue(response.headers["content-type"].startswith("text/event-stream"))
            events = self._read_sse(response)

        self.assertEqual([e["id"] for e in events], expected)
        self.assertEqual(events[-1]["type"], "approval_requested")
        self.assertEqual(self.engine.event_bus.subscriber_count, 1)

    def test_event_stream_subscribes_only_when_streamed(self):
        response = asyncio.run(main.stream_events(replay=0, max_events=1))

        self.assertEqual(response.media_type, "text/event-stream")
        self.assertEqual(self.engine.event_bus.subscriber_count, 1)

    def test_start_while_paused_resumes_halted_executions(self):
        self._start()

        def pause_after_first_step(event):
            if event.type == "step_complete" and event.step_id == "welcome-1":
                self.engine.pause()

        self.engine.add_event_listener(pause_after_first_step)
        execution = self._run_welcome()
        self.assertEqual(execution["steps"][1]["status"], "pending")
        self.engine.remove_event_listener(pause_after_first_step)

        status = self._start()

        self.assertFalse(status["is_paused"])
        resumed = self.client.get(f"/api/executions/{execution['id']}").json()
        self.assertEqual(resumed["steps"][3]["status"], "waiting_approval")
        self.assertEqual(len(self.client.get("/api/approvals").json()), 1)


if __name__ == "__main__":
    unittest.main()
