"""Dictionary skill using the Free Dictionary API (dictionaryapi.dev)."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import quote

from core.errors import InvalidArgument, UpstreamUnavailable
from core.skills import SkillResult, command_pattern
from skills.base import LookupSkill

DICTIONARY_API_BASE = "https://api.dictionaryapi.dev"

SYNTHETIC_NOTE = "(Note: Using backup dictionary data as the API request failed)"
MAX_SYNONYMS = 5
MAX_ANTONYMS = 3

SYNTHETIC_ENTRIES: Dict[str, Dict[str, Any]] = {
    "hello": {
        "phonetic": "/həˈloʊ/",
        "meanings": [
            {
                "partOfSpeech": "exclamation",
                "definitions": [
                    {
                        "definition": "Used as a greeting or to begin a phone conversation.",
                        "example": "hello there, Katie!",
                    }
                ],
                "synonyms": ["hi", "greetings", "hey"],
            },
            {
                "partOfSpeech": "noun",
                "definitions": [
                    {
                        "definition": 'An utterance of "hello"; a greeting.',
                        "example": "she was getting polite nods and hellos from people",
                    }
                ],
            },
        ],
    },
    "weather": {
        "phonetic": "/ˈwɛðər/",
        "meanings": [
            {
                "partOfSpeech": "noun",
                "definitions": [
                    {
                        "definition": (
                            "The state of the atmosphere at a particular place and time as "
                            "regards heat, cloudiness, dryness, sunshine, wind, rain, etc."
                        ),
                        "example": "if the weather's good, we can go for a walk",
                    }
                ],
            },
            {
                "partOfSpeech": "verb",
                "definitions": [
                    {
                        "definition": (
                            "Wear away or change the appearance or texture of (something) by "
                            "long exposure to the atmosphere."
                        ),
                        "example": "his skin was weathered by the sun and wind",
                    }
                ],
            },
        ],
        "synonyms": ["climate", "atmospheric conditions", "meteorological conditions"],
    },
    "calculate": {
        "phonetic": "/ˈkælkjəˌleɪt/",
        "meanings": [
            {
                "partOfSpeech": "verb",
                "definitions": [
                    {
                        "definition": "Determine (the amount or number of something) mathematically.",
                        "example": "the program can calculate the number of words in a text",
                    },
                    {
                        "definition": "Plan or devise (something) carefully.",
                        "example": "the candidate is calculating his next move",
                    },
                ],
            }
        ],
        "synonyms": ["compute", "reckon", "work out", "determine"],
    },
}


@dataclass
class DictionaryDefinition:
    definition: str
    example: Optional[str] = None


@dataclass
class DictionaryMeaning:
    part_of_speech: str
    definitions: List[DictionaryDefinition] = field(default_factory=list)


@dataclass
class DictionaryData:
    word: str
    phonetic: Optional[str] = None
    meanings: List[DictionaryMeaning] = field(default_factory=list)
    synonyms: List[str] = field(default_factory=list)
    antonyms: List[str] = field(default_factory=list)
    synthetic: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _unique(values: Iterable[str], limit: int) -> List[str]:
    seen: List[str] = []
    for value in values:
        if value not in seen:
            seen.append(value)
        if len(seen) == limit:
            break
    return seen


class DictionarySkill(LookupSkill):
    """Look up definitions, synonyms and antonyms for a single word."""

    name = "define"
    description = "Look up the definition of a word"
    triggers = (command_pattern("define"),)
    natural_language_triggers = ("define", "what does", "meaning of", "definition of")
    default_base_url = DICTIONARY_API_BASE

    @property
    def usage(self) -> str:
        return "/define [word]"

    def execute(self, query: str) -> SkillResult:
        cleaned = self.require_argument(query, "Word").lower()
        # Multi-word queries such as "serendipity mean" search the first word only.
        word = cleaned.split()[0].strip("\"'?!.,;:")
        if not word:
            raise InvalidArgument("Word is required", skill=self.name)

        data, synthetic = self.lookup(word)
        return SkillResult(response=self.render(data, synthetic=synthetic), data=data)

    @staticmethod
    def render(data: DictionaryData, *, synthetic: bool = False) -> str:
        lines = []
        if data.meanings:
            first = data.meanings[0]
            lines.append(
                f'Definition of "{data.word}": ({first.part_of_speech}) '
                f"{first.definitions[0].definition}"
            )
            if len(data.meanings) > 1:
                second = data.meanings[1]
                lines.append(f"Also ({second.part_of_speech}): {second.definitions[0].definition}")
            synonyms = _unique(data.synonyms, MAX_SYNONYMS)
            if synonyms:
                lines.append(f"Synonyms: {', '.join(synonyms)}")
            antonyms = _unique(data.antonyms, MAX_ANTONYMS)
            if antonyms:
                lines.append(f"Antonyms: {', '.join(antonyms)}")
        else:
            lines.append(f'Definition of "{data.word}": No definition found.')
        if synthetic:
            lines.append(SYNTHETIC_NOTE)
        return "\n".join(lines)

    # ------------------------------------------------------------------
    def fetch_live(self, query: str) -> Optional[DictionaryData]:
        if self.http_client is None:
            raise UpstreamUnavailable("No HTTP client configured", skill=self.name)
        # One response carries definitions, synonyms and antonyms together.
        payload = self.http_client.get_json(f"{self.base_url}/api/v2/entries/en/{quote(query, safe='')}")
        if not isinstance(payload, list) or not payload:
            return None
        try:
            return self._parse(payload[0], fallback_word=query, synthetic=False)
        except (KeyError, IndexError, TypeError, AttributeError) as exc:
            raise UpstreamUnavailable("Malformed dictionary payload", skill=self.name) from exc

    def synthesize(self, query: str) -> DictionaryData:
        entry = SYNTHETIC_ENTRIES.get(query) or self.generic_entry(query)
        return self._parse({"word": query, **entry}, fallback_word=query, synthetic=True)

    @staticmethod
    def generic_entry(word: str) -> Dict[str, Any]:
        return {
            "phonetic": f"/ˈ{word}/",
            "meanings": [
                {
                    "partOfSpeech": "noun",
                    "definitions": [
                        {
                            "definition": (
                                f'This is a mock definition for "{word}". In a real application, '
                                "this would be fetched from a dictionary API."
                            ),
                            "example": f'Using "{word}" in a sentence.',
                        }
                    ],
                }
            ],
            "synonyms": ["similar", "comparable", "equivalent"],
        }

    @staticmethod
    def _parse(entry: Dict[str, Any], *, fallback_word: str, synthetic: bool) -> DictionaryData:
        meanings: List[DictionaryMeaning] = []
        synonyms: List[str] = []
        antonyms: List[str] = []
        for meaning in entry.get("meanings", []):
            definitions = []
            for item in meaning.get("definitions", []):
                definitions.append(
                    DictionaryDefinition(definition=item["definition"], example=item.get("example"))
                )
                synonyms.extend(item.get("synonyms", []))
                antonyms.extend(item.get("antonyms", []))
            synonyms.extend(meaning.get("synonyms", []))
            antonyms.extend(meaning.get("antonyms", []))
            if definitions:
                meanings.append(
                    DictionaryMeaning(part_of_speech=meaning.get("partOfSpeech", "unknown"), definitions=definitions)
                )
        synonyms.extend(entry.get("synonyms", []))
        antonyms.extend(entry.get("antonyms", []))
        return DictionaryData(
            word=entry.get("word") or fallback_word,
            phonetic=entry.get("phonetic"),
            meanings=meanings,
            synonyms=synonyms,
            antonyms=antonyms,
            synthetic=synthetic,
        )
