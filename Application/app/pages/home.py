import dash
import dash_bootstrap_components as dbc
from dash import html, dcc

from content import home_text  # paragraph text content
from content.data_sources import get_sources, QUERY_SEED
from components.data_tables import create_queue_table
from callbacks.home_callbacks import register_home_callbacks
from utils.data_processing import GeneratorSource

dash.register_page(__name__, path='/')

sources = get_sources()

# -------------   UPLOAD -----------------

upload_box = dcc.Upload(
    id="upload-files",
    children=html.Div(["Drag and drop executables here, or ", html.A("select files")]),
    multiple=True,
    style={
        "width": "100%", "height": "120px", "lineHeight": "120px",
        "borderWidth": "2px", "borderStyle": "dashed", "borderRadius": "1rem",
        "textAlign": "center", "marginBottom": "1rem"
    }
)

# ------------- LAYOUT ----------------

layout = html.Div(
    [
        html.H5("Upload Samples", className="heading"),
        html.Div(home_text.intro_paragraph, className="paragraph"),
        upload_box,
        html.Div(id="upload-notice", className="metric-summary"),
        html.Hr(),

        html.Div(home_text.queue_paragraph, className="paragraph"),
        dcc.Store(id="queue-rows", data=[]),
        html.Div(create_queue_table([]), id="queue-container"),

        html.Div(
            dcc.Link(dbc.Button("Open analysis report", color="secondary"), href="/report"),
            style={"marginTop": "1rem"}
        )
    ],
    className="home-content",
    style={"maxWidth": "1100px", "margin": "auto"}
)

register_home_callbacks(sources.labels, GeneratorSource(QUERY_SEED))
