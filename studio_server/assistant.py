"""Data-query assistant: answers calculation prompts over user data sources.

A data source is a dict {name, type, status, data}; only sources with
status 'ready' and some data are sent to the model.
"""
import json

from .config import get_openai_config
from .errors import AssistantNotConfiguredError
from .openai_client import ChatCompletionClient

MAX_SOURCE_CHARS = 3000
ASSISTANT_TEMPERATURE = 0.3
ASSISTANT_MAX_TOKENS = 500
NO_RESULT = 'Pas de résultat'
NO_DATA = 'Aucune donnée disponible.'
TRUNCATED_MARK = '\n... [données tronquées]'
BINARY_PLACEHOLDER = ('[Fichier binaire - contenu non extrait. '
                      'Utilisez un fichier CSV pour les données tabulaires.]')

SYSTEM_TEMPLATE = """Tu es un assistant spécialisé dans l'analyse de données et les calculs.
Tu reçois des données provenant de différentes sources (fichiers Excel, CSV, JSON, emails, texte).
Tu dois répondre de manière concise et précise aux demandes de calcul ou d'extraction.
Retourne uniquement le résultat demandé, sans explication supplémentaire, sauf si explicitement demandé.
Si tu ne peux pas effectuer le calcul avec les données fournies, indique-le clairement.

DONNÉES DISPONIBLES:
{data_context}"""


class DataAssistant:
    def __init__(self, api_key: str = '', client=None, **client_options):
        if client is None and api_key:
            client = ChatCompletionClient(api_key, **client_options)
        self.client = client

    @classmethod
    def from_config(cls, config: dict = None) -> "DataAssistant":
        c = config or get_openai_config()
        return cls(c['api_key'], api_url=c['api_url'], model=c['model'], timeout=c['timeout'])

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    def execute_prompt(self, prompt: str, data_sources: list = None) -> str:
        """Run a user prompt against the data sources and return the model's answer.

        Raises AssistantNotConfiguredError without an API key, and lets
        RemoteDecisionError from the client propagate.
        """
        if not self.is_configured:
            raise AssistantNotConfiguredError(
                "Clé API OpenAI non configurée. Ajoutez OPENAI_API_KEY dans vos variables d'environnement.")
        system = SYSTEM_TEMPLATE.format(data_context=prepare_data_context(data_sources))
        result = self.client.complete(system, prompt, temperature=ASSISTANT_TEMPERATURE,
                                      max_tokens=ASSISTANT_MAX_TOKENS)
        return result or NO_RESULT


def prepare_data_context(data_sources) -> str:
    """Render the usable data sources as one text block for the system prompt."""
    if not data_sources:
        return NO_DATA

    blocks = []
    for source in data_sources:
        if source.get('status') != 'ready' or not source.get('data'):
            continue
        header = f"\n--- {source.get('name', '')} ({str(source.get('type', '')).upper()}) ---\n"
        data = source['data']
        if isinstance(data, str):
            content = truncate_data(data, MAX_SOURCE_CHARS)
        elif isinstance(data, (bytes, bytearray)):
            content = BINARY_PLACEHOLDER
        else:
            content = json.dumps(data, indent=2, ensure_ascii=False)
        blocks.append(header + content)
    return '\n'.join(blocks)


def truncate_data(data: str, max_length: int = MAX_SOURCE_CHARS) -> str:
    if len(data) <= max_length:
        return data
    return data[:max_length] + TRUNCATED_MARK


def parse_csv_line(line: str) -> list[str]:
    """Split one CSV line on commas outside double quotes.

    Every '"' toggles quoting and is dropped, wherever it sits in the
    field, so '"a""b"' reads as 'ab'. Other characters, '\\r' included,
    are kept as is.
    """
    fields = []
    current = []
    in_quotes = False
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == ',' and not in_quotes:
            fields.append(''.join(current))
            current = []
        else:
            current.append(char)
    fields.append(''.join(current))
    return fields


def parse_csv(content: str) -> list[dict]:
    """Parse CSV text into one dict per data row, keyed by the trimmed header.

    Fewer than two lines (no data rows) gives an empty list. Missing
    trailing values become ''.
    """
    lines = content.strip().split('\n')
    if len(lines) < 2:
        return []

    headers = [h.strip() for h in parse_csv_line(lines[0])]
    rows = []
    for line in lines[1:]:
        values = parse_csv_line(line)
        row = {}
        for i, header in enumerate(headers):
            row[header] = values[i].strip() if i < len(values) else ''
        rows.append(row)
    return rows
