#!/usr/bin/env python3
"""
Event Graph Recommender

Keeps a graph of users, events and categories and recommends events to
users based on what they (and their friends) attended.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from eventgraph.config import load_config
from eventgraph.errors import EventGraphError, InvalidRatingError
from eventgraph.graph import Vertex
from eventgraph.services import (
    ServiceContext,
    UserService,
    CatalogService,
    RecommendationService,
    GraphService,
    create_services,
    validate_rating,
)


class App:
    """Bundle of services driven by the console."""

    def __init__(
        self,
        users: UserService,
        catalog: CatalogService,
        recommendations: RecommendationService,
        graph: GraphService
    ):
        self.users = users
        self.catalog = catalog
        self.recommendations = recommendations
        self.graph = graph


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def split_csv(value: Optional[str]) -> List[str]:
    """Split a comma-separated argument, dropping blanks."""
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


# === Display ===

def display_vertices(title: str, vertices: List[Vertex]):
    """Display a numbered list of vertex ids."""
    if not vertices:
        print(f"\nNo {title.lower()} available.")
        return
    print(f"\n{title}:")
    for i, v in enumerate(vertices, 1):
        print(f"  {i}. {v.id}")


def display_events(events: List[Vertex]):
    """Display events with their categories."""
    if not events:
        print("\nNo events available.")
        return
    print("\nEvents:")
    for i, e in enumerate(events, 1):
        print(f"  {i}. {e.id} [{', '.join(e.categories)}]")


def display_recommendations(user_id: str, events: List[Vertex]):
    """Display recommended events."""
    if not events:
        print("\nNo recommendations available.")
        return
    print(f"\nRecommended events for {user_id}:")
    for event in events:
        print(f"- {event.id}")


def display_adjacency(graph: GraphService):
    """Display the adjacency list."""
    print("\nAdjacency List:")
    for vertex_id, neighbors in graph.adjacency_view().items():
        print(f"  {vertex_id} -> [{', '.join(neighbors)}]")


def display_stats(graph: GraphService):
    """Display graph statistics."""
    stats = graph.stats()
    print(f"\nVertices: {stats['total_vertices']}  Edges: {stats['total_edges']}")
    for vertex_type, count in stats["vertices_by_type"].items():
        print(f"  {vertex_type}: {count}")
    for edge_type, count in stats["edges_by_type"].items():
        print(f"  {edge_type}: {count}")


# === Interactive input ===

def prompt_text(prompt: str) -> str:
    return input(prompt).strip()


def prompt_number(minimum: int, maximum: int) -> int:
    """Ask until a number in range is entered."""
    while True:
        choice = input(f"Enter number ({minimum}-{maximum}): ").strip()
        try:
            value = int(choice)
            if minimum <= value <= maximum:
                return value
        except ValueError:
            pass
        print("Invalid input. Try again.")


def select_one(title: str, vertices: List[Vertex]) -> Optional[str]:
    """Let the user pick one vertex by number."""
    display_vertices(title, vertices)
    if not vertices:
        return None
    return vertices[prompt_number(1, len(vertices)) - 1].id


def select_many(title: str, vertices: List[Vertex]) -> List[str]:
    """Let the user pick one or more vertices by comma-separated numbers."""
    display_vertices(title, vertices)
    if not vertices:
        return []

    selected: List[str] = []
    while not selected:
        raw = input("Enter number(s) separated by comma (e.g. 1,3): ")
        for part in raw.split(","):
            try:
                idx = int(part.strip())
            except ValueError:
                continue
            if 1 <= idx <= len(vertices) and vertices[idx - 1].id not in selected:
                selected.append(vertices[idx - 1].id)
        if not selected:
            print("Invalid input. Please select at least one.")
    return selected


def prompt_rating() -> Optional[float]:
    """Ask for a rating until it is valid; blank means unrated."""
    while True:
        raw = input("Enter your rating for the event (1-5, blank to skip): ").strip()
        if not raw:
            return None
        try:
            return validate_rating(raw)
        except InvalidRatingError as e:
            print(e)


MENU = """
Menu:
 1. Add User
 2. Remove User
 3. Add Event
 4. Add Category
 5. Record Attendance
 6. Recommend Events
 7. Remove Category
 8. Remove Event
 9. View Graph
10. Exit
11. Add Friendship (between users)"""


def run_menu_action(app: App, command: str) -> bool:
    """
    Run one menu command.

    Returns:
        False when the user asked to exit
    """
    if command == "1":
        app.users.add_user(prompt_text("Enter new User Name: "))
        print("User added.")
    elif command == "2":
        user = select_one("Users", app.users.list_users())
        if user:
            app.users.remove_user(user)
            print("User removed.")
    elif command == "3":
        name = prompt_text("Enter Event Name: ")
        categories = select_many("Categories", app.catalog.list_categories())
        if categories:
            app.catalog.add_event(name, categories)
            print("Event added.")
    elif command == "4":
        app.catalog.add_category(prompt_text("Enter new Category Name: "))
        print("Category added.")
    elif command == "5":
        user = select_one("Users", app.users.list_users())
        event = select_one("Events", app.catalog.list_events())
        if user and event:
            app.users.record_attendance(user, event, prompt_rating())
            print("Attendance recorded.")
    elif command == "6":
        user = select_one("Users", app.users.list_users())
        if user:
            categories = None
            if app.recommendations.needs_categories(user):
                print("\nYou have not attended any events yet. Select your preferred categories:")
                categories = select_many("Categories", app.catalog.list_categories())
            display_recommendations(user, app.recommendations.recommend(user, categories=categories))
    elif command == "7":
        category = select_one("Categories", app.catalog.list_categories())
        if category:
            app.catalog.remove_category(category)
            print("Category removed.")
    elif command == "8":
        event = select_one("Events", app.catalog.list_events())
        if event:
            app.catalog.remove_event(event)
            print("Event removed.")
    elif command == "9":
        display_adjacency(app.graph)
    elif command == "10":
        print("Exiting...")
        return False
    elif command == "11":
        users = app.users.list_users()
        user1 = select_one("Users", users)
        user2 = select_one("Users", users)
        if user1 and user2:
            app.users.add_friendship(user1, user2)
            print(f"Friendship added between {user1} and {user2}.")
    else:
        print("Invalid command. Please try again.")
    return True


def interactive_menu(app: App):
    """Numbered menu loop; errors are printed and the loop continues."""
    while True:
        print(MENU)
        command = input("Enter choice: ").strip()
        try:
            if not run_menu_action(app, command):
                return
        except EventGraphError as e:
            print(f"Error: {e}")


# === One-shot commands ===

def run_command(app: App, args) -> bool:
    """
    Run the action selected by command-line flags.

    Returns:
        True if an action flag was given
    """
    if args.add_user:
        app.users.add_user(args.add_user)
        print(f"User added: {args.add_user}")
    elif args.remove_user:
        app.users.remove_user(args.remove_user)
        print(f"User removed: {args.remove_user}")
    elif args.add_category:
        app.catalog.add_category(args.add_category)
        print(f"Category added: {args.add_category}")
    elif args.remove_category:
        app.catalog.remove_category(args.remove_category)
        print(f"Category removed: {args.remove_category}")
    elif args.add_event:
        event = app.catalog.add_event(args.add_event, split_csv(args.categories))
        print(f"Event added: {event.id} [{', '.join(event.categories)}]")
    elif args.remove_event:
        app.catalog.remove_event(args.remove_event)
        print(f"Event removed: {args.remove_event}")
    elif args.attend:
        user, event = args.attend
        app.users.record_attendance(user, event, validate_rating(args.rating))
        print(f"Attendance recorded: {user} -> {event}")
    elif args.friend:
        user1, user2 = args.friend
        app.users.add_friendship(user1, user2)
        print(f"Friendship added between {user1} and {user2}.")
    elif args.recommend:
        events = app.recommendations.recommend(
            args.recommend,
            max_depth=args.depth,
            categories=split_csv(args.categories) or None
        )
        display_recommendations(args.recommend, events)
    elif args.list:
        display_vertices("Users", app.users.list_users())
        display_vertices("Categories", app.catalog.list_categories())
        display_events(app.catalog.list_events())
    elif args.view_graph:
        display_adjacency(app.graph)
    elif args.stats:
        display_stats(app.graph)
    elif args.seed:
        app.graph.seed_defaults()
        print("Default data loaded.")
    else:
        return False
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Event Graph Recommender"
    )
    parser.add_argument(
        "--data-file",
        type=str,
        help="Graph snapshot file (default: EVENT_GRAPH_FILE or data/event_graph.json)"
    )
    parser.add_argument(
        "--no-seed",
        action="store_true",
        help="Don't load the demo data into an empty graph"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument("--add-user", type=str, metavar="USER", help="Add a user")
    parser.add_argument("--remove-user", type=str, metavar="USER", help="Remove a user")
    parser.add_argument("--add-category", type=str, metavar="CATEGORY", help="Add a category")
    parser.add_argument("--remove-category", type=str, metavar="CATEGORY", help="Remove a category")
    parser.add_argument("--add-event", type=str, metavar="EVENT", help="Add an event (use with --categories)")
    parser.add_argument("--remove-event", type=str, metavar="EVENT", help="Remove an event")
    parser.add_argument(
        "--categories",
        type=str,
        help="Comma-separated categories for --add-event, or preferred categories for --recommend"
    )
    parser.add_argument(
        "--attend",
        nargs=2,
        metavar=("USER", "EVENT"),
        help="Record that USER attended EVENT (use with --rating)"
    )
    parser.add_argument("--rating", type=str, help="Rating 1-5 for --attend")
    parser.add_argument(
        "--friend",
        nargs=2,
        metavar=("USER1", "USER2"),
        help="Add a friendship between two users"
    )
    parser.add_argument("--recommend", type=str, metavar="USER", help="Recommend events for a user")
    parser.add_argument("--depth", type=int, help="Traversal depth for --recommend")
    parser.add_argument("--list", action="store_true", help="List users, categories and events")
    parser.add_argument("--view-graph", action="store_true", help="Print the adjacency list")
    parser.add_argument("--stats", action="store_true", help="Print graph statistics")
    parser.add_argument("--seed", action="store_true", help="Load demo data into an empty graph")
    return parser


def main():
    args = build_parser().parse_args()

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    config = load_config()
    if args.data_file:
        config.storage.graph_file = Path(args.data_file)
    if args.no_seed or args.seed:
        config.storage.seed_defaults = False

    context = ServiceContext.create(config=config)
    _, users, catalog, recommendations, graph = create_services(context)
    app = App(users, catalog, recommendations, graph)

    try:
        if not run_command(app, args):
            interactive_menu(app)
    except EventGraphError as e:
        print(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
    finally:
        if context.last_persistence_error:
            print(f"Warning: graph was not saved ({context.last_persistence_error})")

    return 0


if __name__ == "__main__":
    sys.exit(main())
