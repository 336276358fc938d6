#!/usr/bin/env python3
"""
Chat Orchestrator Interactive CLI

A command-line chat client for the orchestrator. Like any other caller it
keeps the conversation history itself and sends it with every message.
"""

import argparse
import json
import logging
import sys
from typing import Optional

from .models import HistoryMessage
from .orchestrator import ChatOrchestrator

logger = logging.getLogger(__name__)

HELP_TEXT = """
Available commands:
  /help     - Show this help message
  /trace    - Show the steps of the last answer
  /tools    - List available tools
  /clear    - Clear conversation history
  /quit     - Exit the CLI

Type your message below.
"""


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def format_trace(trace: list[dict]) -> str:
    if not trace:
        return "No trace available. Send a message first."
    lines = []
    for step in trace:
        header = f"Step {step['step']}" + ("  [FINAL]" if step["is_final"] else "")
        lines.append(header)
        if step["action"]:
            lines.append(f"  Tool: {step['action']} {json.dumps(step['action_input'], ensure_ascii=False)}")
        if step["observation"]:
            obs = step["observation"]
            lines.append(f"  Result: {obs[:200] + '...' if len(obs) > 200 else obs}")
        if step["final_answer"]:
            lines.append(f"  Reply: {step['final_answer']}")
    return "\n".join(lines)


class InteractiveCLI:
    """Interactive chat session with client-side history."""

    def __init__(self, orchestrator: Optional[ChatOrchestrator] = None):
        self.orchestrator = orchestrator or ChatOrchestrator()
        self.history: list[HistoryMessage] = []

    def send(self, message: str) -> str:
        """Send one message, record both sides in the history, return the reply."""
        result = self.orchestrator.handle_chat(message, self.history)
        self.history.append(HistoryMessage(role="user", text=message))
        self.history.append(HistoryMessage(role="assistant", text=result.reply))
        if result.tools_used:
            return f"{result.reply}\n\n(tools: {', '.join(result.tools_used)})"
        return result.reply

    def handle_command(self, command: str) -> bool:
        """Run a slash command. Returns False when the CLI should exit."""
        command = command.lower()
        if command in ("/quit", "/exit", "/q"):
            print("\nGoodbye!\n")
            return False
        if command in ("/help", "/h", "/?"):
            print(HELP_TEXT)
        elif command == "/trace":
            print(format_trace(self.orchestrator.get_trace()))
        elif command == "/tools":
            print(self.orchestrator.registry.get_tools_summary())
        elif command == "/clear":
            self.history = []
            print("\nConversation history cleared.\n")
        else:
            print(f"\nUnknown command: {command}\nType /help for available commands.\n")
        return True

    def run(self) -> None:
        """Run the interactive loop until /quit, EOF or Ctrl+C."""
        print(HELP_TEXT)
        while True:
            try:
                user_input = input(">>> ").strip()
            except (EOFError, KeyboardInterrupt):
                print("\nGoodbye!\n")
                break
            if not user_input:
                continue
            if user_input.startswith("/"):
                if not self.handle_command(user_input):
                    break
                continue
            print(f"\n{self.send(user_input)}\n")


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Chat Orchestrator Interactive CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                 # Start interactive mode
  %(prog)s -v                              # Start with verbose logging
  %(prog)s -q "What's the weather in Seoul?"  # Send a single message
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("-q", "--query", type=str, help="Send a single message and exit")
    parser.add_argument("--json", action="store_true", help="Output results as JSON (with -q)")
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    from .config import config

    orchestrator = ChatOrchestrator(app_config=config)

    if args.query:
        result = orchestrator.handle_chat(args.query)
        if args.json:
            output = {**result.to_dict(), "trace": orchestrator.get_trace()}
            print(json.dumps(output, indent=2, ensure_ascii=False))
        else:
            print(result.reply)
        return

    InteractiveCLI(orchestrator).run()


if __name__ == "__main__":
    main()
