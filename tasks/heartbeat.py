from planner import orchestrator

if __name__ == "__main__":
    orchestrator.heartbeat()
