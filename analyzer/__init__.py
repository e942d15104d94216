"""
Decision Engine package.

- engine: DecisionEngine, RecommendationRequest and create_engine
- prompts: prompt composition for the reasoning service
- llm_client: Anthropic client wrapper
- reply_parser: JSON extraction from the service's reply

Import from the submodules directly (e.g. `from analyzer.engine import
create_engine`).
"""
