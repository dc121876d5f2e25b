"""Built-in ADK tools that generated LLM agents can be granted."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List


class Capability(str, Enum):
    GOOGLE_SEARCH = "google_search"
    GOOGLE_CODE_EXECUTION = "google_code_execution"

    VERTEX_AI_RAG_RETRIEVAL = "vertex_ai_rag_retrieval"
    VERTEX_AI_SEARCH = "vertex_ai_search"

    BIGQUERY_LIST_DATASET_IDS = "bigquery_list_dataset_ids"
    BIGQUERY_GET_DATASET_INFO = "bigquery_get_dataset_info"
    BIGQUERY_LIST_TABLE_IDS = "bigquery_list_table_ids"
    BIGQUERY_GET_TABLE_INFO = "bigquery_get_table_info"
    BIGQUERY_EXECUTE_SQL = "bigquery_execute_sql"
    BIGQUERY_FORECAST = "bigquery_forecast"
    BIGQUERY_ASK_DATA_INSIGHTS = "bigquery_ask_data_insights"

    SPANNER_LIST_TABLE_NAMES = "spanner_list_table_names"
    SPANNER_GET_TABLE_SCHEMA = "spanner_get_table_schema"
    SPANNER_EXECUTE_SQL = "spanner_execute_sql"
    SPANNER_SIMILARITY_SEARCH = "spanner_similarity_search"

    BIGTABLE_LIST_INSTANCES = "bigtable_list_instances"
    BIGTABLE_GET_INSTANCE_INFO = "bigtable_get_instance_info"
    BIGTABLE_LIST_TABLES = "bigtable_list_tables"
    BIGTABLE_GET_TABLE_INFO = "bigtable_get_table_info"
    BIGTABLE_EXECUTE_SQL = "bigtable_execute_sql"

    GKE_CODE_EXECUTOR = "gke_code_executor"


CAPABILITY_DESCRIPTIONS: Dict[Capability, str] = {
    Capability.GOOGLE_SEARCH: "Web searches using Google Search",
    Capability.GOOGLE_CODE_EXECUTION: "Execute code for calculations and data manipulation",
    Capability.VERTEX_AI_RAG_RETRIEVAL: "Private data retrieval using Vertex AI RAG Engine",
    Capability.VERTEX_AI_SEARCH: "Search across private data stores via Vertex AI",
    Capability.BIGQUERY_LIST_DATASET_IDS: "List BigQuery dataset IDs",
    Capability.BIGQUERY_GET_DATASET_INFO: "Get BigQuery dataset information",
    Capability.BIGQUERY_LIST_TABLE_IDS: "List BigQuery table IDs",
    Capability.BIGQUERY_GET_TABLE_INFO: "Get BigQuery table information",
    Capability.BIGQUERY_EXECUTE_SQL: "Execute SQL queries on BigQuery",
    Capability.BIGQUERY_FORECAST: "BigQuery forecasting capabilities",
    Capability.BIGQUERY_ASK_DATA_INSIGHTS: "Ask data insights from BigQuery",
    Capability.SPANNER_LIST_TABLE_NAMES: "List Cloud Spanner table names",
    Capability.SPANNER_GET_TABLE_SCHEMA: "Get Cloud Spanner table schema",
    Capability.SPANNER_EXECUTE_SQL: "Execute SQL queries on Cloud Spanner",
    Capability.SPANNER_SIMILARITY_SEARCH: "Similarity search on Cloud Spanner",
    Capability.BIGTABLE_LIST_INSTANCES: "List Bigtable instances",
    Capability.BIGTABLE_GET_INSTANCE_INFO: "Get Bigtable instance information",
    Capability.BIGTABLE_LIST_TABLES: "List Bigtable tables",
    Capability.BIGTABLE_GET_TABLE_INFO: "Get Bigtable table information",
    Capability.BIGTABLE_EXECUTE_SQL: "Execute SQL queries on Bigtable",
    Capability.GKE_CODE_EXECUTOR: "Secure code execution in GKE sandboxed environments",
}


def list_all() -> List[Capability]:
    """Return every capability in catalog order."""
    return list(Capability)


def describe(capability_id: str) -> str:
    """Return the description for a capability id, or "" if it is unknown."""
    try:
        return CAPABILITY_DESCRIPTIONS[Capability(capability_id)]
    except ValueError:
        return ""

