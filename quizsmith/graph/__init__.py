"""LangGraph workflow and state management."""

# Note: Avoid importing workflow here to prevent circular imports
# Import directly from modules as needed:
# from quizsmith.graph.state import GenerationState, create_generation_state
# from quizsmith.graph.workflow import compile_generation_workflow, compile_collect_workflow
