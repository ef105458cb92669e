"""
Components for displaying data tables.
"""

from dash import html, dcc, dash_table
import dash_bootstrap_components as dbc

from utils.data_processing import DEFAULT_DETAIL_URL


def create_data_table(data_df, table_id=None, page_size=10):
    """
    Create a data table component.

    Args:
        data_df (DataFrame): Data to display in the table
        table_id (str, optional): Component id
        page_size (int): Rows per page

    Returns:
        dash_table.DataTable: Table component
    """
    kwargs = {'id': table_id} if table_id else {}
    return dash_table.DataTable(
        columns=[{'name': col, 'id': col} for col in data_df.columns],
        data=data_df.to_dict('records'),
        filter_action='native',
        sort_action='native',
        page_size=page_size,
        style_table={'overflowX': 'auto'},
        style_cell={'textAlign': 'left', 'padding': '5px'},
        style_header={'fontWeight': 'bold', 'backgroundColor': '#f9f9f9'},
        **kwargs
    )


def uncertain_table_records(uncertain_df):
    """Rows for the uncertain samples table, with a markdown link to each report."""
    records = uncertain_df.to_dict('records')
    for record in records:
        record['accuracy'] = round(float(record['accuracy']), 4)
        record['report_link'] = f"[Report]({record.get('detail_url') or DEFAULT_DETAIL_URL})"
    return records


def create_uncertain_samples_section(uncertain_df, labels):
    """
    Create the uncertain samples table with re-labelling controls.

    Args:
        uncertain_df (DataFrame): Output of uncertain_samples
        labels (list): Label catalog offered as new labels

    Returns:
        html.Div: Table plus label dropdown and submit button
    """
    table = dash_table.DataTable(
        id='uncertain-table',
        columns=[
            {'name': 'File', 'id': 'filename'},
            {'name': 'True Label', 'id': 'true_label'},
            {'name': 'Predicted Label', 'id': 'pred_label'},
            {'name': 'Accuracy', 'id': 'accuracy'},
            {'name': 'Details', 'id': 'report_link', 'presentation': 'markdown'},
        ],
        data=uncertain_table_records(uncertain_df),
        row_selectable='single',
        page_size=10,
        style_table={'overflowX': 'auto'},
        style_cell={'textAlign': 'left', 'padding': '5px'},
        style_header={'fontWeight': 'bold', 'backgroundColor': '#f9f9f9'}
    )

    return html.Div([
        table,
        dbc.Row([
            dbc.Col(dcc.Dropdown(
                id='relabel-dropdown',
                options=[{'label': label, 'value': label} for label in labels],
                placeholder="New label",
                clearable=True
            ), md=6),
            dbc.Col(dbc.Button("Submit", id='relabel-submit', color='secondary',
                               n_clicks=0), md=2),
        ], className="mt-2"),
        html.Div(id='relabel-status', className='metric-summary')
    ])


def create_queue_table(rows):
    """
    Create the upload queue table.

    Args:
        rows (list): Rows from build_queue_rows

    Returns:
        dash_table.DataTable: Queue table
    """
    return dash_table.DataTable(
        id='queue-table',
        columns=[
            {'name': '#', 'id': 'id'},
            {'name': 'File', 'id': 'filename'},
            {'name': 'Predicted Label', 'id': 'predicted_label'},
        ],
        data=rows,
        page_size=10,
        style_cell={'textAlign': 'left', 'padding': '5px'},
        style_header={'fontWeight': 'bold', 'backgroundColor': '#f9f9f9'}
    )
