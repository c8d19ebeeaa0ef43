"""
Entities package.

Each subdirectory holds one stage of the PromptQL pipeline:
- schema_context/: Renders the table catalog and examples for prompts
- llm/: Interchangeable LLM providers for SQL generation
- query_validator/: Validates SQL queries before execution
- execution/: Executes validated SQL through Hasura's run_sql
- promptql/: Composes the stages into generate / execute / query
- workflow/: Builds and owns the pipeline's clients
- shared/: Protocols and exception types used across stages
"""
