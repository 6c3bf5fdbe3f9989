from __future__ import annotations

from datetime import datetime

import folium
import streamlit as st
from streamlit_folium import st_folium

from proximity_map.geo import haversine_m
from proximity_map.models import DEFAULT_THRESHOLD_M, SEED_OTHERS, SEED_PRIMARY, Entity, SessionParams
from proximity_map.roster import Roster

# A click is matched to the marker whose center lies within this distance.
CLICK_MATCH_M = 1.0


def _record_change(roster: Roster) -> None:
    st.session_state["last_change"] = datetime.now().strftime("%H:%M:%S")
    st.session_state["alert_count"] = len(roster.proximity.alerts)


def _new_roster(threshold_m: float) -> Roster:
    roster = Roster(SEED_PRIMARY, SEED_OTHERS, SessionParams(threshold_m=threshold_m))
    roster.subscribe(_record_change)
    return roster


def _get_roster() -> Roster:
    if "roster" not in st.session_state:
        st.session_state["roster"] = _new_roster(DEFAULT_THRESHOLD_M)
    return st.session_state["roster"]


def _entity_at(roster: Roster, lat: float, lng: float) -> Entity | None:
    best: Entity | None = None
    best_d = CLICK_MATCH_M
    for e in roster:
        d = haversine_m(lat, lng, e.latitude, e.longitude)
        if d <= best_d:
            best, best_d = e, d
    return best


def _build_map(roster: Roster) -> folium.Map:
    primary = roster.primary
    m = folium.Map(location=list(primary.position), zoom_start=13, tiles=None)
    folium.TileLayer(
        tiles="https://tile.openstreetmap.org/{z}/{x}/{y}.png",
        attr="© OpenStreetMap contributors",
        name="OpenStreetMap",
    ).add_to(m)

    res = roster.proximity
    for e in roster:
        color = res.color_for(e.id)
        popup_html = (
            f"<b>{e.name}</b><br>Lat: {e.latitude:.4f}, Lng: {e.longitude:.4f}"
            f"<br>{'Fixed' if e.is_fixed else 'Movable'}"
        )
        folium.Marker(
            location=list(e.position),
            tooltip=e.name,
            popup=folium.Popup(popup_html, max_width=250),
            icon=folium.Icon(color=color, icon="user", prefix="fa"),
        ).add_to(m)
        folium.Circle(
            location=list(e.position),
            radius=roster.threshold_m,
            color=color,
            fill=True,
            fill_color=color,
            fill_opacity=0.2,
        ).add_to(m)
    return m


def _handle_click(roster: Roster, clicked: dict[str, float]) -> None:
    # st_folium returns the last click on every rerun under the same key. Moving
    # to a fresh key after each handled click clears it.
    st.session_state["map_generation"] += 1
    target = _entity_at(roster, float(clicked["lat"]), float(clicked["lng"]))
    if target is not None:
        roster.jitter(target.id)
    st.rerun()


def main() -> None:
    st.set_page_config(page_title="Proximity map", layout="wide")
    st.title("Proximity map")

    roster = _get_roster()
    st.session_state.setdefault("map_generation", 0)
    if "threshold_m" not in st.session_state:
        st.session_state["threshold_m"] = float(roster.threshold_m)

    with st.sidebar:
        st.subheader("Threshold")
        st.number_input(
            "Circle radius (m)",
            min_value=0.0,
            step=50.0,
            key="threshold_m",
            help="Two entities alert when their centers are within twice this distance.",
        )
        threshold_m = float(st.session_state["threshold_m"])
        if threshold_m != roster.threshold_m:
            roster.set_threshold(threshold_m)

        st.subheader("Entities")
        for e in roster:
            label = f"Unfix {e.name}" if e.is_fixed else f"Fix {e.name}"
            if st.button(label, key=f"toggle-{e.id}", use_container_width=True):
                roster.toggle_fixed(e.id)
                st.rerun()

        if st.button("Reset roster", key="reset", use_container_width=True):
            st.session_state["roster"] = _new_roster(threshold_m)
            st.session_state["map_generation"] += 1
            st.rerun()

    for alert in roster.proximity.alerts:
        st.warning(alert, icon="⚠️")

    out = st_folium(
        _build_map(roster),
        key=f"map-{st.session_state['map_generation']}",
        height=600,
        use_container_width=True,
    )
    clicked = (out or {}).get("last_object_clicked")
    if clicked:
        _handle_click(roster, clicked)

    primary = roster.primary
    if st.button("Move Current User", key="move-primary", type="primary", disabled=primary.is_fixed):
        roster.move_primary_randomly()
        st.rerun()

    if "last_change" in st.session_state:
        st.caption(
            f"Last change at {st.session_state['last_change']}, "
            f"{st.session_state['alert_count']} alert(s)."
        )


if __name__ == "__main__":
    main()
