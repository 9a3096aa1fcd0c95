import asyncio
import time

from gatelink_app.adkit.blocker import (
    BlockerDetector,
    DetectionResult,
    PROBE_SCRIPT_URL,
    REFRESH_BUTTON_ID,
    WARNING_ID,
)
from gatelink_app.adkit.loader import AdLoader


def run_detector(dom, scenario):
    """Build the detector inside the loop and run scenario(detector)"""
    async def main():
        detector = BlockerDetector(
            dom,
            loader=AdLoader(dom, retry_delay=0.01),
            bait_settle_delay=0.01,
            check_delay=0.01,
            probe_timeout=0.05,
        )
        return await scenario(detector)

    return asyncio.run(main())


def run_once(dom) -> DetectionResult:
    return run_detector(dom, lambda detector: detector.run())


class TestDetection:
    def test_clean_page(self, dom):
        result = run_once(dom)

        assert not result.bait_hidden
        assert not result.privacy_browser
        assert result.probe_failed is False
        assert not result.blocked
        assert dom.get_element_by_id(WARNING_ID) is None
        assert "overflow" not in dom.body.style

    def test_bait_is_removed(self, dom):
        run_once(dom)

        assert all("adsbox" not in child.class_name for child in dom.body.children)

    def test_hidden_bait_blocks(self, dom):
        dom.hide_bait = True

        result = run_once(dom)

        assert result.bait_hidden
        assert result.blocked
        assert dom.get_element_by_id(WARNING_ID) is not None

    def test_probe_error_blocks(self, dom):
        dom.behaviours[PROBE_SCRIPT_URL] = "error"

        result = run_once(dom)

        assert result.probe_failed
        assert result.blocked
        assert dom.get_element_by_id(WARNING_ID) is not None

    def test_probe_timeout_blocks(self, dom):
        dom.behaviours[PROBE_SCRIPT_URL] = "hang"

        result = run_once(dom)

        assert result.probe_failed
        assert dom.attempts(PROBE_SCRIPT_URL) == 1

    def test_privacy_browser_blocks(self, dom):
        dom.privacy_browser = True

        result = run_once(dom)

        assert result.privacy_browser
        assert result.blocked

    def test_bait_result_does_not_wait_for_script_check(self, dom):
        dom.behaviours[PROBE_SCRIPT_URL] = "hang"

        async def scenario(detector):
            result = await detector.result()
            return result, result.probe_failed

        result, probe_failed = run_detector(dom, scenario)

        assert probe_failed is None
        assert not result.blocked


class TestBlockingModal:
    def test_modal_shown_at_bait_check_while_script_hangs(self, dom):
        dom.hide_bait = True
        dom.behaviours[PROBE_SCRIPT_URL] = "hang"

        async def main():
            detector = BlockerDetector(dom)
            task = asyncio.ensure_future(detector.run())
            await asyncio.sleep(0.3)
            shown = dom.get_element_by_id(WARNING_ID) is not None
            task.cancel()
            return shown

        assert asyncio.run(main())
        assert dom.body.style["overflow"] == "hidden"

    def test_failed_script_check_raises_modal_later(self, dom):
        dom.behaviours[PROBE_SCRIPT_URL] = "error"

        async def scenario(detector):
            result = await detector.result()
            shown_early = dom.get_element_by_id(WARNING_ID) is not None
            await detector.run()
            return result, shown_early

        result, shown_early = run_detector(dom, scenario)

        assert not shown_early
        assert result.probe_failed is True
        assert dom.get_element_by_id(WARNING_ID) is not None

    def test_modal_locks_scroll_and_offers_refresh(self, dom):
        dom.hide_bait = True

        run_once(dom)

        assert dom.body.style["overflow"] == "hidden"
        button = dom.get_element_by_id(REFRESH_BUTTON_ID)
        assert button is not None
        assert dom.reload_count == 0

        button.click()

        assert dom.reload_count == 1

    def test_modal_shown_once(self, dom):
        async def scenario(detector):
            detector.show_blocker_warning()
            detector.show_blocker_warning()

        run_detector(dom, scenario)

        overlays = [child for child in dom.body.children if child.id == WARNING_ID]
        assert len(overlays) == 1
        assert len([child for child in dom.head.children if child.tag_name == "style"]) == 1


class TestCheckAdBlock:
    def test_reports_without_modal(self, dom):
        dom.hide_bait = True
        reported = []

        run_detector(dom, lambda detector: detector.check_ad_block(reported.append))

        assert reported == [True]
        assert dom.get_element_by_id(WARNING_ID) is None

    def test_reports_clean(self, dom):
        reported = []

        run_detector(dom, lambda detector: detector.check_ad_block(reported.append))

        assert reported == [False]

    def test_reports_at_check_delay_while_script_hangs(self, dom):
        dom.hide_bait = True
        dom.behaviours[PROBE_SCRIPT_URL] = "hang"
        reported = []

        async def main():
            detector = BlockerDetector(dom)
            started = time.monotonic()
            await detector.check_ad_block(reported.append)
            return time.monotonic() - started

        elapsed = asyncio.run(main())

        assert reported == [True]
        assert elapsed < 1.0
        assert dom.get_element_by_id(WARNING_ID) is None

    def test_shares_one_detection_pass_with_run(self, dom):
        dom.hide_bait = True
        reported = []

        async def scenario(detector):
            result, _ = await asyncio.gather(
                detector.run(),
                detector.check_ad_block(reported.append),
            )
            return result

        result = run_detector(dom, scenario)

        assert reported == [result.blocked] == [True]
        assert dom.attempts(PROBE_SCRIPT_URL) == 1
