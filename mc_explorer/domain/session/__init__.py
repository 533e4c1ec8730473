from mc_explorer.domain.session.state import GraphState, Selection

__all__ = ["GraphState", "Selection"]
