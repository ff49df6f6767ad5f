import asyncio
import json
import unittest

from schemas.analysis import AnalysisResult, AssetQuery, YoutubeAnalysis
from services.ai.analysis_service import (
    decode_response,
    extract_json_text,
    extract_sources,
    parse_analysis,
    request_analysis,
)
from services.ai.gemini_client import GroundedResponse
from services.errors import InvalidInput, MalformedResponse, ProviderError


class _FakeGenerator:
    def __init__(self, text="", citations=None, error=None):
        self.text = text
        self.citations = citations or []
        self.error = error
        self.calls = []

    async def generate(self, prompt, *, use_web=True):
        self.calls.append((prompt, use_web))
        if self.error is not None:
            raise self.error
        return GroundedResponse(text=self.text, citations=self.citations)


ASSET_PAYLOAD = {
    "symbol": "AAPL",
    "suggestion": "Hold",
    "rationale": ["Services growth", "Rich valuation"],
    "technicalAnalysis": {
        "summary": "Range bound.",
        "patterns": [{"name": "Double bottom", "description": "Support near 170."}],
    },
}


class ExtractionTests(unittest.TestCase):
    def test_fenced_block_yields_inner_object(self):
        inner = json.dumps(ASSET_PAYLOAD)
        text = f"Here you go:\n```json\n{inner}\n```\ntrailing"
        self.assertEqual(extract_json_text(text), inner)

    def test_first_fenced_block_wins(self):
        text = '```json\n{"symbol": "A"}\n```\n```json\n{"symbol": "B"}\n```'
        self.assertEqual(extract_json_text(text), '{"symbol": "A"}')

    def test_unfenced_text_is_trimmed(self):
        self.assertEqual(extract_json_text('  \n{"symbol": "AAPL"}\n '), '{"symbol": "AAPL"}')


class ParsingTests(unittest.TestCase):
    def test_channel_name_discriminates_channel(self):
        analysis = parse_analysis({"channelName": "@chan", "overallStance": "Bullish"})
        self.assertIsInstance(analysis, YoutubeAnalysis)
        self.assertEqual(analysis.kind, "channel")

    def test_symbol_discriminates_asset(self):
        analysis = parse_analysis(ASSET_PAYLOAD)
        self.assertIsInstance(analysis, AnalysisResult)
        self.assertEqual(analysis.kind, "asset")
        self.assertEqual(analysis.technicalAnalysis.patterns[0].name, "Double bottom")

    def test_neither_key_is_malformed(self):
        with self.assertRaises(MalformedResponse):
            parse_analysis({"ticker": "AAPL"})

    def test_missing_optional_fields_default_to_empty(self):
        asset = parse_analysis({"symbol": "GC", "technicalAnalysis": {"summary": "Up", "patterns": None}})
        self.assertEqual(asset.rationale, [])
        self.assertEqual(asset.suggestion, "")
        self.assertEqual(asset.technicalAnalysis.patterns, [])

        channel = parse_analysis({"channelName": "@chan"})
        self.assertEqual(channel.keyThemes, [])
        self.assertEqual(channel.recentVideosSummary, [])

    def test_mixed_type_rationale_items_become_text(self):
        asset = parse_analysis({"symbol": "AAPL", "suggestion": "Hold", "rationale": ["a", 5, None]})
        self.assertEqual(asset.rationale, ["a", "5"])

    def test_single_string_rationale_becomes_one_item(self):
        asset = parse_analysis({"symbol": "AAPL", "rationale": "single reason"})
        self.assertEqual(asset.rationale, ["single reason"])

    def test_non_object_technical_analysis_is_dropped(self):
        asset = parse_analysis({"symbol": "AAPL", "technicalAnalysis": "n/a"})
        self.assertIsNone(asset.technicalAnalysis)

    def test_wrong_typed_nested_items_fall_back_to_defaults(self):
        asset = parse_analysis(
            {"symbol": "AAPL", "technicalAnalysis": {"summary": 3, "patterns": ["flag", {"name": "Flag"}]}}
        )
        self.assertEqual(asset.technicalAnalysis.summary, "3")
        self.assertEqual([p.name for p in asset.technicalAnalysis.patterns], ["Flag"])

        channel = parse_analysis(
            {"channelName": "@chan", "keyThemes": {"a": 1}, "recentVideosSummary": [{"title": "Ep 1"}, "junk"]}
        )
        self.assertEqual(channel.keyThemes, [])
        self.assertEqual([v.title for v in channel.recentVideosSummary], ["Ep 1"])
        self.assertEqual(channel.recentVideosSummary[0].summary, "")

    def test_invalid_json_is_malformed(self):
        with self.assertRaises(MalformedResponse) as ctx:
            decode_response('{"symbol": "AAPL", ')
        self.assertIn("not valid JSON", ctx.exception.message)

    def test_non_object_json_is_malformed(self):
        with self.assertRaises(MalformedResponse):
            decode_response('["AAPL"]')


class SourceExtractionTests(unittest.TestCase):
    def test_only_chunks_with_uri_are_kept(self):
        chunks = [{"web": {"uri": "", "title": "x"}}, {"web": {"uri": "http://a", "title": "A"}}, {}]
        sources = extract_sources(chunks)
        self.assertEqual(len(sources), 1)
        self.assertEqual(sources[0].uri, "http://a")
        self.assertEqual(sources[0].title, "A")

    def test_missing_title_stays_none_and_order_and_duplicates_kept(self):
        chunks = [
            {"web": {"uri": "http://b"}},
            {"web": {"uri": "http://a", "title": "A"}},
            {"web": {"uri": "http://b"}},
        ]
        sources = extract_sources(chunks)
        self.assertEqual([s.uri for s in sources], ["http://b", "http://a", "http://b"])
        self.assertIsNone(sources[0].title)

    def test_none_chunks(self):
        self.assertEqual(extract_sources(None), [])


class RequestAnalysisTests(unittest.TestCase):
    def test_blank_identifier_fails_before_provider_call(self):
        for asset_type in ("stock", "commodity", "index", "youtube"):
            fake = _FakeGenerator(text=json.dumps(ASSET_PAYLOAD))
            with self.assertRaises(InvalidInput):
                asyncio.run(request_analysis(AssetQuery(assetType=asset_type, identifier="   "), fake))
            self.assertEqual(fake.calls, [])

    def test_success_assembles_analysis_and_sources(self):
        fake = _FakeGenerator(
            text="```json\n" + json.dumps(ASSET_PAYLOAD) + "\n```",
            citations=[{"web": {"uri": "https://news.example/aapl", "title": "AAPL news"}}, {"web": {"uri": ""}}],
        )
        result = asyncio.run(request_analysis(AssetQuery(assetType="stock", identifier="aapl"), fake))

        self.assertEqual(result.analysis.symbol, "AAPL")
        self.assertEqual([s.uri for s in result.sources], ["https://news.example/aapl"])
        prompt, use_web = fake.calls[0]
        self.assertTrue(use_web)
        self.assertIn('"AAPL"', prompt)

    def test_channel_response(self):
        fake = _FakeGenerator(text=json.dumps({"channelName": "@chan", "keyThemes": ["AI"]}))
        result = asyncio.run(request_analysis(AssetQuery(assetType="youtube", identifier="@chan"), fake))
        self.assertEqual(result.analysis.kind, "channel")
        self.assertEqual(result.analysis.keyThemes, ["AI"])
        self.assertEqual(result.sources, [])

    def test_provider_failure_is_wrapped(self):
        fake = _FakeGenerator(error=RuntimeError("429 RESOURCE_EXHAUSTED"))
        with self.assertRaises(ProviderError) as ctx:
            asyncio.run(request_analysis(AssetQuery(identifier="aapl"), fake))
        self.assertIn("RESOURCE_EXHAUSTED", ctx.exception.message)
        self.assertEqual(len(fake.calls), 1)

    def test_unparseable_response_is_malformed(self):
        fake = _FakeGenerator(text="I cannot help with that.")
        with self.assertRaises(MalformedResponse):
            asyncio.run(request_analysis(AssetQuery(identifier="aapl"), fake))


if __name__ == "__main__":
    unittest.main()
