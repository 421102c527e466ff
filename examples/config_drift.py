"""Example: detect drift between two versions of a deployment config.

Run:
    python examples/config_drift.py
"""

from __future__ import annotations

from objdiff import DiffConfig, NodeState, compute_diff

# --- Two versions of the same config ---

DEPLOYED = {
    "service": "checkout",
    "replicas": 2,
    "image": {"name": "checkout", "tag": "1.4.0"},
    "env": {"LOG_LEVEL": "info", "DB_PASSWORD": "hunter2"},
    "ports": [8080],
    "labels": {"team-payments", "tier-1"},
}

PROPOSED = {
    "service": "checkout",
    "replicas": 4,
    "image": {"name": "checkout", "tag": "1.5.0"},
    "env": {"LOG_LEVEL": "debug", "DB_PASSWORD": "correct-horse", "FEATURE_X": "on"},
    "ports": [8080, 9090],
    "labels": {"team-payments"},
}

# Secrets are never reported, the port list is judged as a whole.
CONFIG = DiffConfig(
    ignored_paths={"/env/DB_PASSWORD"},
    equals_only_paths={"/ports"},
)

_SYMBOLS = {
    NodeState.ADDED: "+",
    NodeState.REMOVED: "-",
    NodeState.CHANGED: "~",
}


def main():
    """Run the example."""
    root = compute_diff(PROPOSED, DEPLOYED, config=CONFIG)
    if not root.has_changes:
        print("No drift.")
        return

    for node in root.iter_changes():
        if node.has_children:
            continue  # leaves only
        print(f"  {_SYMBOLS[node.state]} {node.path}")


if __name__ == "__main__":
    main()
