"""
Ngũ Hành Streamlit UI
- Batch analysis: upload a number list, rank the numbers passing every filter
- Quick check: verdict and reason for a single number
"""

import sys
import traceback

import streamlit as st
from dotenv import load_dotenv

load_dotenv()
sys.path.insert(0, ".")

from nguhanh.config import setup_logging
from nguhanh.pipeline import AnalysisPipeline, format_results, result_filename
from nguhanh.schemas import AnalysisMode, AnalyzeConfig, Element, RankedNumber

setup_logging()

st.set_page_config(
    page_title="Ngũ Hành - Phân tích số điện thoại",
    page_icon="☯️",
    layout="wide",
)

# Session State
if "analysis_result" not in st.session_state:
    st.session_state.analysis_result = None
if "check_result" not in st.session_state:
    st.session_state.check_result = None
if "error_message" not in st.session_state:
    st.session_state.error_message = None
if "display_count" not in st.session_state:
    st.session_state.display_count = 100

DEFAULTS = AnalyzeConfig()
MENH_OPTIONS = [Element.KIM, Element.MOC, Element.THUY, Element.HOA, Element.THO]


def main():
    st.title("☯️ Ngũ Hành")
    st.subheader("Phân tích và xếp hạng số điện thoại theo bản mệnh")

    if st.session_state.error_message:
        st.error(st.session_state.error_message)
        if st.button("OK"):
            st.session_state.error_message = None
            st.rerun()

    config = render_sidebar()

    tab1, tab2 = st.tabs(["📂 Batch analysis", "🔎 Quick check"])

    with tab1:
        render_batch_tab(config)

    with tab2:
        render_quick_check_tab(config)


def render_sidebar() -> AnalyzeConfig:
    """Collects every AnalyzeConfig option from the sidebar."""
    with st.sidebar:
        st.header("⚙️ Cấu hình")

        mode_label = st.radio(
            "Chế độ", ["Tương hợp (Compatibility)", "Cân bằng tuyệt đối (AbsoluteBalance)"],
            index=0, key="mode",
        )
        mode = AnalysisMode.COMPATIBILITY if mode_label.startswith("Tương hợp") else AnalysisMode.ABSOLUTE_BALANCE

        payload = {"mode": mode.value}

        if mode == AnalysisMode.COMPATIBILITY:
            menh = st.selectbox("Bản mệnh", MENH_OPTIONS, format_func=lambda e: f"{e.label} ({e.english})", key="menh")
            payload["user_menh"] = menh.name

            st.subheader("📊 Điểm theo vai trò")
            payload["score_sinh"] = st.number_input("Sinh (tương sinh)", value=DEFAULTS.score_sinh, step=0.5, key="score_sinh")
            payload["score_cung"] = st.number_input("Cùng (bản mệnh)", value=DEFAULTS.score_cung, step=0.5, key="score_cung")
            payload["score_bi_khac"] = st.number_input("Bị khắc", value=DEFAULTS.score_bi_khac, step=0.5, key="score_bi_khac")
            payload["score_sinh_xuat"] = st.number_input("Sinh xuất", value=DEFAULTS.score_sinh_xuat, step=0.5, key="score_sinh_xuat")
            payload["score_khac"] = st.number_input("Khắc", value=DEFAULTS.score_khac, step=0.5, key="score_khac")

            st.subheader("🎚️ Ngưỡng lọc")
            payload["filter_khac_max"] = st.number_input("Khắc tối đa", 0, 10, DEFAULTS.filter_khac_max, key="f_khac")
            payload["filter_bi_khac_max"] = st.number_input("Bị khắc tối đa", 0, 10, DEFAULTS.filter_bi_khac_max, key="f_bi_khac")
            payload["filter_sinh_min"] = st.number_input("Sinh tối thiểu", 0, 10, DEFAULTS.filter_sinh_min, key="f_sinh")
            payload["filter_cung_min"] = st.number_input("Cùng tối thiểu", 0, 10, DEFAULTS.filter_cung_min, key="f_cung")
            payload["filter_tong_max"] = st.number_input("Sinh + Cùng tối đa", 0, 10, DEFAULTS.filter_tong_max, key="f_tong")
            payload["filter_any_max"] = st.number_input("Một hành tối đa", 1, 10, DEFAULTS.filter_any_max, key="f_any")
            payload["toggle_completeness"] = st.checkbox("Đủ 5 hành", value=True, key="t_complete")

        st.subheader("✅ Bộ lọc chung")
        payload["toggle_static_balance"] = st.checkbox("Cân bằng tĩnh (chẵn/lẻ, tổng)", value=True, key="t_static")

        payload["toggle_prefix_filter"] = st.checkbox("Đầu số", value=False, key="t_prefix")
        if payload["toggle_prefix_filter"]:
            payload["prefix_value"] = st.text_input("Đầu số", value="", placeholder="090", key="prefix")

        payload["toggle_suffix_filter"] = st.checkbox("Đuôi số (3 số cuối chứa)", value=False, key="t_suffix")
        if payload["toggle_suffix_filter"]:
            payload["suffix_value"] = st.text_input("Các số, cách nhau dấu phẩy", value="", placeholder="8,9", key="suffix")

        payload["toggle_blacklist_filter"] = st.checkbox("Loại trừ số", value=False, key="t_blacklist")
        if payload["toggle_blacklist_filter"]:
            payload["blacklist_digits"] = st.text_input("Các số loại trừ", value="", placeholder="4,7", key="blacklist")

    return AnalyzeConfig.from_payload(payload)


def render_batch_tab(config: AnalyzeConfig):
    """Batch analysis tab"""
    st.markdown("""
    **Xếp hạng danh sách số**
    - Mỗi dòng một số (10 chữ số, cho phép dấu ngăn cách)
    - Chỉ giữ lại các số qua tất cả bộ lọc, sắp xếp theo điểm giảm dần
    """)

    uploaded = st.file_uploader("File danh sách số (.txt)", type=["txt"], key="upload")

    if st.button("▶️ Phân tích", type="primary", disabled=uploaded is None, key="btn_analyze"):
        st.session_state.display_count = 100
        with st.spinner("Đang phân tích..."):
            result, error = run_batch_analysis(uploaded.getvalue(), config)
        if error:
            st.session_state.error_message = error
        else:
            st.session_state.analysis_result = result
        st.rerun()

    if st.session_state.analysis_result:
        display_batch_result(st.session_state.analysis_result)
    else:
        st.info("Chọn file và bấm 'Phân tích'")


def run_batch_analysis(raw: bytes, config: AnalyzeConfig):
    """Runs the pipeline; returns (report dict, error message)."""
    try:
        lines = raw.decode("utf-8", errors="replace").splitlines()
        report = AnalysisPipeline(config).analyze(lines)
        return report.model_dump(), None
    except Exception as e:
        return None, f"Lỗi khi phân tích: {e}\n\n{traceback.format_exc()}"


def display_batch_result(result: dict):
    """Batch result view"""
    st.success(result.get("summary", ""))

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Tổng số dòng", result.get("total_count", 0))
    with col2:
        st.metric("Hợp lệ", result.get("passed_count", 0))
    with col3:
        st.metric("Sai định dạng", result.get("malformed_count", 0))

    rejected = result.get("rejected_by_stage", {})
    if rejected:
        with st.expander("❌ Bị loại theo bộ lọc"):
            for stage, count in rejected.items():
                st.write(f"- **{stage}**: {count}")

    rows = result.get("results", [])
    if not rows:
        return

    total = len(rows)
    display_count = st.session_state.display_count
    st.subheader(f"⭐ Kết quả ({min(display_count, total)}/{total})")
    st.dataframe(
        [{"#": r["rank"], "Số": r["number"], "Điểm": round(r["score"], 2)} for r in rows[:display_count]],
        use_container_width=True,
        hide_index=True,
    )

    if display_count < total:
        if st.button(f"📋 Xem thêm (+100, còn {total - display_count})", key="load_more"):
            st.session_state.display_count += 100
            st.rerun()

    content = format_results(RankedNumber(**r) for r in rows)
    st.download_button(
        "💾 Tải kết quả",
        data=content.encode("utf-8"),
        file_name=result_filename(),
        mime="text/plain",
        key="download",
    )


def render_quick_check_tab(config: AnalyzeConfig):
    """Single-number check tab"""
    number = st.text_input("Số cần kiểm tra", value="", placeholder="0912345678", key="quick_number")

    if st.button("🔎 Kiểm tra", key="btn_check"):
        if not number.strip():
            st.warning("Vui lòng nhập một số.")
            return
        outcome = AnalysisPipeline(config).check(number)
        st.session_state.check_result = outcome.tagged()

    result = st.session_state.check_result
    if not result:
        return
    if "Valid" in result:
        st.success(f"✅ Hợp lệ. Điểm: {result['Valid']['score']:.2f}")
    else:
        st.error(f"❌ Không hợp lệ: {result['Invalid']['reason']}")


if __name__ == "__main__":
    main()
