"""
Puzzle Splitter - browser edition

Run with:
    streamlit run streamlit_app.py
"""

from __future__ import annotations

from pathlib import Path

import streamlit as st

from puzzle_splitter.config import SplitterConfig
from puzzle_splitter.export import build_zip, piece_filename
from puzzle_splitter.state import (
    SplitterState,
    on_bulk_export,
    on_file_selected,
    on_grid_spec_changed,
    on_tile_requested,
)

# -- Page config -------------------------------------------------------
st.set_page_config(
    page_title="Puzzle Splitter",
    page_icon=None,
    layout="wide",
    initial_sidebar_state="collapsed",
)

_DEFAULTS = SplitterConfig()

# -- CSS ---------------------------------------------------------------
st.markdown("""
<style>
    @import url('https://fonts.googleapis.com/css2?family=Cormorant+Garamond:ital,wght@0,300;0,400;1,300&family=Inter:wght@200;300;400;500&display=swap');

    .stApp {
        background-color: #faf9f6;
        color: #2a2a2a;
        font-family: 'Inter', 'Helvetica Neue', sans-serif;
    }
    .block-container {
        max-width: 1100px;
        padding-top: 3.5rem;
        padding-bottom: 4rem;
    }

    .gallery-title {
        font-family: 'Cormorant Garamond', 'Georgia', serif;
        font-size: 2.8rem;
        font-weight: 300;
        letter-spacing: 0.06em;
        text-align: center;
        color: #1a1a1a;
        border-bottom: 1px solid #1a1a1a;
        padding-bottom: 0.6rem;
        margin-bottom: 0.5rem;
    }
    .gallery-subtitle {
        font-family: 'Inter', sans-serif;
        font-size: 0.75rem;
        font-weight: 300;
        color: #1a1a1a;
        letter-spacing: 0.04em;
        line-height: 1.8;
        text-align: center;
        margin-bottom: 1.5rem;
    }

    .label-title {
        font-family: 'Inter', sans-serif;
        font-size: 0.9rem;
        font-weight: 400;
        letter-spacing: 0.10em;
        text-transform: uppercase;
        text-align: center;
        color: #2a2a2a;
        margin: 1.2rem 0 0.6rem;
    }
    .label-detail {
        font-family: 'Cormorant Garamond', 'Georgia', serif;
        font-style: italic;
        color: #a0a09a;
        text-align: center;
    }

    .status-line {
        font-family: 'Cormorant Garamond', serif;
        font-size: 1.05rem;
        font-weight: 400;
        font-style: italic;
        color: #2a2a2a;
        text-align: center;
        border-top: 1px solid #e0ded8;
        padding: 1.2rem 0;
        margin-top: 2rem;
    }

    /* Buttons */
    .stButton > button, .stDownloadButton > button {
        border-radius: 0px !important;
        letter-spacing: 0.10em;
        text-transform: uppercase;
        font-size: 0.6rem;
    }

    /* File uploader */
    div[data-testid="stFileUploader"] {
        border: 1px dashed #a0a09a;
        padding: 1.5rem;
        background: transparent;
    }

    /* Tile grid */
    div[data-testid="stImage"] img {
        border: 1px solid #e0ded8;
        transition: transform 0.2s ease;
    }
    div[data-testid="stImage"] img:hover {
        transform: translateY(-3px) scale(1.03);
    }

    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
    header {visibility: hidden;}
</style>
""", unsafe_allow_html=True)


def _state() -> SplitterState:
    return st.session_state.splitter


def _set_state(state: SplitterState) -> None:
    st.session_state.splitter = state


def _mark_bulk_export() -> None:
    _set_state(on_bulk_export(_state()))


if "splitter" not in st.session_state:
    st.session_state.splitter = SplitterState()
    st.session_state.upload_digest = None

# -- Title -------------------------------------------------------------
st.markdown('<div class="gallery-title">Puzzle Splitter</div>', unsafe_allow_html=True)
st.markdown(
    '<div class="gallery-subtitle">'
    "Drop an image, choose how many rows and columns to cut it into, and "
    "download every piece as a lossless PNG. Pieces are numbered left to "
    "right, top to bottom."
    "</div>",
    unsafe_allow_html=True,
)

# -- Upload ------------------------------------------------------------
uploaded = st.file_uploader(
    "Drag & drop an image here or click to select",
    type=sorted(ext.lstrip(".") for ext in _DEFAULTS.SUPPORTED_EXTENSIONS),
)

# Streamlit reruns the script on every interaction; only a new file resets tiles
new_state, st.session_state.upload_digest = on_file_selected(
    _state(),
    st.session_state.upload_digest,
    uploaded.getvalue() if uploaded is not None else None,
    uploaded.type if uploaded is not None else None,
    uploaded.name if uploaded is not None else None,
)
_set_state(new_state)

# -- Controls ----------------------------------------------------------
c_rows, c_cols, c_split = st.columns([1, 1, 2], vertical_alignment="bottom")
with c_rows:
    rows_in = st.number_input("Rows", value=_DEFAULTS.rows, step=1, key="rows_in")
with c_cols:
    cols_in = st.number_input("Columns", value=_DEFAULTS.cols, step=1, key="cols_in")
_set_state(on_grid_spec_changed(_state(), rows_in, cols_in))

with c_split:
    spec = _state().spec
    if st.button(
        f"Split into {spec.count} pieces",
        type="primary",
        disabled=not _state().can_split,
        use_container_width=True,
    ):
        with st.spinner("Splitting image..."):
            _set_state(on_tile_requested(_state(), max_workers=_DEFAULTS.max_workers))

state = _state()

# -- Original preview --------------------------------------------------
if state.surface is not None:
    st.markdown('<div class="label-title">Original Image</div>', unsafe_allow_html=True)
    _, mid, _ = st.columns([1, 2, 1])
    with mid:
        st.image(state.surface.image, use_container_width=True)
    st.markdown(
        f'<div class="label-detail">Dimensions: {state.surface.width} &times; '
        f"{state.surface.height} pixels</div>",
        unsafe_allow_html=True,
    )

# -- Pieces ------------------------------------------------------------
if state.tiles:
    grid = state.tiles_spec
    st.markdown("---")
    st.markdown('<div class="label-title">Pieces</div>', unsafe_allow_html=True)

    for row in range(grid.rows):
        cells = st.columns(grid.cols)
        for tile in state.tiles[row * grid.cols : (row + 1) * grid.cols]:
            with cells[tile.col]:
                st.image(tile.png, use_container_width=True)
                st.download_button(
                    f"#{tile.index}",
                    data=tile.png,
                    file_name=piece_filename(tile.index),
                    mime="image/png",
                    key=f"dl_{tile.index}",
                    help=f"Piece {tile.index} (Row {tile.row + 1}, Col {tile.col + 1})",
                    use_container_width=True,
                )

    stem = Path(state.surface.source_name or "image").stem
    _, dl_col, _ = st.columns([1, 2, 1])
    with dl_col:
        st.download_button(
            "Download all pieces",
            data=build_zip(state.tiles),
            file_name=f"{stem}_pieces.zip",
            mime="application/zip",
            on_click=_mark_bulk_export,
            use_container_width=True,
        )

# -- Status ------------------------------------------------------------
if _state().status:
    st.markdown(f'<div class="status-line">{_state().status}</div>', unsafe_allow_html=True)
