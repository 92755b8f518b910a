"""
Tests for check mapping and the confidence policy.
"""

import pytest

from acceptance_core.mapping import (
    CheckMapper,
    ConfidencePolicy,
    clamp_confidence,
    estimate_testability,
    map_criterion_to_check,
    map_flow_step,
)
from acceptance_core.parsing import parse_criteria_content
from acceptance_core.models import (
    AcceptanceCriterion,
    CheckConfig,
    CheckKind,
    CriterionType,
    ElementSelector,
    FlowStep,
    ManualCheck,
    ScreenshotAnalysisCheck,
    SelectorBy,
    StepAction,
    TextMatchMode,
    UIActionCheck,
    VisualCheck,
)


def _criterion(criterion_type, config, description="criterion"):
    return AcceptanceCriterion(
        id="section-1",
        section="Section",
        description=description,
        type=criterion_type,
        config=config,
        line_number=1,
    )


def _step(description, action, selector=None, number=1):
    return FlowStep(step_number=number, description=description, line_number=10, action=action, selector=selector)


class TestMapCriterion:
    """Per-type mapping"""

    def test_visibility(self, make_criterion):
        """Visible criteria wait for the element"""
        check = map_criterion_to_check(make_criterion("Login button is visible"))
        assert isinstance(check, UIActionCheck)
        assert check.snippet == 'await waitFor(element(by.text("Login"))).toBeVisible().withTimeout(10000);'
        assert check.confidence == pytest.approx(0.6)

    def test_visibility_without_selector(self):
        check = map_criterion_to_check(_criterion(CriterionType.ELEMENT_VISIBLE, CheckConfig()))
        assert check == ManualCheck("Cannot infer element selector from description")

    def test_text_with_selector(self, make_criterion):
        check = map_criterion_to_check(make_criterion('"Welcome back" text is displayed'))
        assert check.kind == CheckKind.UI_ACTION
        assert check.snippet == 'await expect(element(by.text("Welcome back"))).toHaveText("Welcome back");'
        assert check.confidence == pytest.approx(0.7)

    def test_text_located_by_expected_text(self):
        """Without a selector the expected text locates the element at the text-only confidence"""
        config = CheckConfig(expected_text="Hello", text_match_mode=TextMatchMode.EXACT)
        check = map_criterion_to_check(_criterion(CriterionType.ELEMENT_TEXT, config))
        assert check.snippet == 'await expect(element(by.text("Hello"))).toHaveText("Hello");'
        assert check.confidence == 0.5
        assert check.selector == ElementSelector(SelectorBy.TEXT, "Hello", 0.5)

    def test_text_contains_mode(self):
        config = CheckConfig(expected_text="Hello", text_match_mode=TextMatchMode.CONTAINS)
        check = map_criterion_to_check(_criterion(CriterionType.ELEMENT_TEXT, config))
        assert "toHaveText(new RegExp(\"Hello\"))" in check.snippet

    def test_text_without_anything(self):
        check = map_criterion_to_check(_criterion(CriterionType.ELEMENT_TEXT, CheckConfig()))
        assert check.reason == "Cannot infer element selector or expected text"

    def test_color(self, make_criterion):
        check = map_criterion_to_check(make_criterion("Background color is #FF0000"))
        assert isinstance(check, ScreenshotAnalysisCheck)
        assert check.target_color == "#FF0000"
        assert check.tolerance == 10
        assert check.confidence == 0.6

    def test_color_without_hex(self):
        check = map_criterion_to_check(_criterion(CriterionType.ELEMENT_COLOR, CheckConfig()))
        assert check.reason == "No color specification found"

    def test_tap_interaction(self, make_criterion):
        check = map_criterion_to_check(make_criterion('Tapping "Settings" button opens the drawer'))
        assert 'element(by.text("Settings"))' in check.snippet
        assert "await el.tap();" in check.snippet
        assert check.confidence == pytest.approx(0.63)

    def test_unknown_interaction_taps(self):
        config = CheckConfig(
            selector=ElementSelector(SelectorBy.ID, "feed", 1.0),
            interaction_type=None,
        )
        check = map_criterion_to_check(_criterion(CriterionType.INTERACTION, config))
        assert check.snippet == 'await element(by.id("feed")).tap();'

    def test_interaction_without_selector(self):
        check = map_criterion_to_check(_criterion(CriterionType.INTERACTION, CheckConfig()))
        assert check.reason == "Cannot infer element selector for interaction"

    def test_modal_close(self):
        """Close wording waits for the modal to disappear"""
        config = CheckConfig(selector=ElementSelector(SelectorBy.ID, "share-sheet", 1.0))
        check = map_criterion_to_check(
            _criterion(CriterionType.MODAL, config, description="Share sheet closes on backdrop press")
        )
        assert check.snippet == 'await waitFor(element(by.id("share-sheet"))).not.toBeVisible().withTimeout(5000);'
        assert check.confidence == pytest.approx(0.8)

    def test_modal_without_selector(self):
        check = map_criterion_to_check(_criterion(CriterionType.MODAL, CheckConfig(), description="Drawer opens"))
        assert check.reason == "Modal behavior requires specific element selector"
        check = map_criterion_to_check(_criterion(CriterionType.MODAL, CheckConfig(), description="Drawer"))
        assert check.reason == "Cannot determine modal behavior to test"

    def test_navigation(self):
        config = CheckConfig(selector=ElementSelector(SelectorBy.ID, "settings-screen", 1.0))
        check = map_criterion_to_check(_criterion(CriterionType.NAVIGATION, config))
        assert check.confidence == pytest.approx(0.7)
        check = map_criterion_to_check(_criterion(CriterionType.NAVIGATION, CheckConfig()))
        assert check.reason == "Navigation check requires screen identifier"

    def test_scroll(self):
        config = CheckConfig(selector=ElementSelector(SelectorBy.ID, "carousel", 1.0))
        check = map_criterion_to_check(
            _criterion(CriterionType.SCROLL, config, description="Carousel is horizontal scrollable")
        )
        assert check.snippet == "await element(by.id(\"carousel\")).scroll(100, 'right');"
        assert check.confidence == pytest.approx(0.6)

    def test_scroll_feel_is_manual(self):
        config = CheckConfig(selector=ElementSelector(SelectorBy.ID, "feed", 1.0))
        check = map_criterion_to_check(_criterion(CriterionType.SCROLL, config, description="Scrolling is smooth"))
        assert check.reason == "Scroll smoothness requires manual visual verification"

    def test_state_change_is_manual(self):
        check = map_criterion_to_check(_criterion(CriterionType.STATE_CHANGE, CheckConfig()))
        assert check.reason == "State change verification requires multi-step flow"

    def test_layout(self, make_criterion):
        check = map_criterion_to_check(make_criterion("Header layout uses left alignment"))
        assert isinstance(check, VisualCheck)
        assert check.confidence == 0.5

    @pytest.mark.parametrize("criterion_type", [
        CriterionType.MANUAL,
        CriterionType.FLOW_STEP,
        CriterionType.PREREQUISITE,
    ])
    def test_unmapped_types(self, criterion_type):
        check = map_criterion_to_check(_criterion(criterion_type, CheckConfig()))
        assert check.kind == CheckKind.MANUAL
        assert check.reason == f'Criterion type "{criterion_type.value}" requires manual verification'
        assert check.confidence == 0.0

    def test_confidence_always_in_range(self, sample_markdown):
        """Every mapped check has confidence in [0, 1]"""
        for criterion in parse_criteria_content(sample_markdown).iter_criteria():
            assert 0.0 <= map_criterion_to_check(criterion).confidence <= 1.0


class TestConfidencePolicy:
    """Injected confidence table"""

    def test_custom_multiplier(self, make_criterion):
        policy = ConfidencePolicy(multipliers={CriterionType.INTERACTION: 0.5})
        check = CheckMapper(policy).map_criterion(make_criterion('Tapping "Settings" button opens the drawer'))
        assert check.confidence == pytest.approx(0.35)

    def test_clamped(self):
        policy = ConfidencePolicy(multipliers={CriterionType.ELEMENT_VISIBLE: 2.0})
        config = CheckConfig(selector=ElementSelector(SelectorBy.ID, "logo", 1.0))
        check = CheckMapper(policy).map_criterion(_criterion(CriterionType.ELEMENT_VISIBLE, config))
        assert check.confidence == 1.0

    def test_custom_fixed(self, make_criterion):
        policy = ConfidencePolicy(fixed={CriterionType.ELEMENT_COLOR: 0.9})
        check = CheckMapper(policy).map_criterion(make_criterion("Background color is #FF0000"))
        assert check.confidence == 0.9

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            ConfidencePolicy(multipliers={CriterionType.SCROLL: -1.0})

    def test_clamp(self):
        assert clamp_confidence(-0.5) == 0.0
        assert clamp_confidence(1.5) == 1.0
        assert clamp_confidence(0.42) == 0.42


class TestMapFlowStep:
    """Flow step snippets"""

    def test_tap(self):
        mapped = map_flow_step(_step('Tap "Continue"', StepAction.TAP, ElementSelector(SelectorBy.TEXT, "Continue", 0.5)))
        assert mapped.is_executable
        assert mapped.snippet == 'await element(by.text("Continue")).tap();'

    def test_verify(self):
        mapped = map_flow_step(_step("Verify logo", StepAction.VERIFY, ElementSelector(SelectorBy.ID, "logo", 1.0)))
        assert mapped.snippet == 'await expect(element(by.id("logo"))).toBeVisible();'

    def test_type(self):
        step = _step(
            'Type "user@example.com" into email field',
            StepAction.TYPE,
            ElementSelector(SelectorBy.ID, "email-input", 1.0),
        )
        snippet = map_flow_step(step).snippet
        assert snippet.startswith('const input = element(by.id("email-input"));')
        assert "await input.clearText();" in snippet
        assert snippet.endswith('await input.typeText("user@example.com");')

    def test_type_without_literal(self):
        step = _step("Type the email", StepAction.TYPE, ElementSelector(SelectorBy.ID, "email-input", 1.0))
        assert not map_flow_step(step).is_executable

    @pytest.mark.parametrize("description,delay", [
        ("Wait 2 seconds", 2000),
        ("Wait 500ms", 500),
        ("Pause 3s", 3000),
        ("Wait 250 milliseconds", 250),
    ])
    def test_wait(self, description, delay):
        mapped = map_flow_step(_step(description, StepAction.WAIT))
        assert mapped.snippet == f"await new Promise(r => setTimeout(r, {delay}));"

    def test_wait_without_duration(self):
        assert map_flow_step(_step("Wait for the spinner", StepAction.WAIT)).snippet is None

    def test_swipe(self):
        selector = ElementSelector(SelectorBy.TEXT, "Feed", 0.7)
        assert map_flow_step(_step("Swipe left on feed", StepAction.SWIPE, selector)).snippet == (
            "await element(by.text(\"Feed\")).swipe('left');"
        )
        assert map_flow_step(_step("Swipe the feed", StepAction.SWIPE, selector)).snippet == (
            "await element(by.text(\"Feed\")).swipe('up');"
        )

    @pytest.mark.parametrize("action", [StepAction.NAVIGATE, StepAction.LOGIN, StepAction.OBSERVE, None])
    def test_not_executable(self, action):
        """Navigation, login, observation and unknown steps have no snippet"""
        mapped = map_flow_step(_step("Do something", action, ElementSelector(SelectorBy.ID, "x", 1.0)))
        assert mapped.snippet is None
        assert not mapped.is_executable

    def test_missing_selector(self):
        assert map_flow_step(_step('Tap the thing', StepAction.TAP)).snippet is None


class TestEstimateTestability:
    def test_estimate(self, sample_markdown):
        """Manual types count as manual; automatable types that map to manual count as blocked"""
        criteria = list(parse_criteria_content(sample_markdown).iter_criteria())
        criteria.append(_criterion(CriterionType.ELEMENT_VISIBLE, CheckConfig()))

        estimate = estimate_testability(criteria)
        assert estimate["automatable"] == 5
        assert estimate["manual"] == 1
        assert estimate["blocked"] == 1
        # 0.6 + 0.6 + 0.4 + 0.5 + 0.63
        assert estimate["average_confidence"] == pytest.approx(2.73 / 5)

    def test_empty(self):
        assert estimate_testability([])["average_confidence"] == 0.0
