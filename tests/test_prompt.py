from disinfo_engine.prompts.analysis import GenerationConfig, build_analysis_request


def test_content_is_interpolated_verbatim():
    content = 'He said {"x": 1} and {name} is "fine"'
    req = build_analysis_request(content)
    assert f'Content: "{content}"' in req.prompt
    assert req.prompt.count(content) == 1


def test_prompt_carries_the_rules_and_schema():
    prompt = build_analysis_request("anything").prompt
    assert "Respond in JSON format only" in prompt
    assert "3-4 sentences" in prompt
    assert '"NSFW Content"' in prompt and "fictional" in prompt
    assert "Don't mention AI" in prompt
    for key in ("classification", "contentType", "confidence", "explanation",
                "keyTerms", "verificationSources", "recommendations"):
        assert f'"{key}"' in prompt


def test_no_length_limit_in_the_builder():
    big = "a" * 50_000
    assert big in build_analysis_request(big).prompt


def test_generation_config_is_fixed_and_low_temperature():
    gen = build_analysis_request("x").generation
    assert gen == GenerationConfig()
    assert gen.temperature == 0.1
    assert gen.max_output_tokens == 1200
