"""
Hawaii Growth Calculator: Flask API Server
Intake → estimation engine → (background) CRM + e-mail delivery.
Reference tables and config are loaded once on first request and only read afterwards.
"""
import io
import logging
import os
import threading
import traceback
import uuid
import time
from flask import Flask, jsonify, request, send_file
from engines import reference_tables as rt
from engines.config import load_config, load_env_file
from engines.data_loader import load_reference_tables
from engines.delivery import deliver_lead
from engines.estimator import calculate
from engines.intake import IntakeError, SECTIONS, validate_section, validate_submission

load_env_file()
logging.basicConfig(level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
                    format='%(asctime)s %(levelname)s %(name)s: %(message)s')

app = Flask(__name__)

STATE = {'tables': None, 'config': None, 'loaded': False}


def _load():
    config = load_config()
    STATE['config'] = config
    STATE['tables'] = load_reference_tables(config['referenceTablesPath'])
    STATE['loaded'] = True


@app.before_request
def _ensure_loaded():
    if not STATE['loaded']:
        _load()
        logging.info('[OK] Reference tables and config loaded')


def _tracking_id():
    return f"calc-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def _dispatch_delivery(data, results, tracking_id):
    """Fire-and-forget unless DELIVERY_IN_BACKGROUND is off (then inline, still non-raising)."""
    config = STATE['config']
    if config['deliverInBackground']:
        threading.Thread(target=deliver_lead, args=(data, results, tracking_id, config),
                         name=f'deliver-{tracking_id}', daemon=True).start()
        return None
    return deliver_lead(data, results, tracking_id, config)


def _run(payload):
    data = validate_submission(payload)
    return data, calculate(data, STATE['tables'])


# ══════════════════════════════════════════════════════════════
#  ROUTES
# ══════════════════════════════════════════════════════════════

@app.route('/api/calculate', methods=['POST'])
def api_calculate():
    try:
        payload = request.get_json(silent=True)
        logging.info(f"Calculate request with sections: {sorted(payload) if isinstance(payload, dict) else None}")
        data, results = _run(payload)
    except IntakeError as e:
        logging.warning(f"Rejected submission: {e} {e.missing_sections or list(e.errors)}")
        return jsonify({'success': False, **e.to_dict()}), 400
    except Exception as e:
        traceback.print_exc()
        return jsonify({'error': 'Internal server error', 'message': str(e)}), 500

    tracking_id = _tracking_id()
    _dispatch_delivery(data, results, tracking_id)
    return jsonify({'success': True, 'results': results, 'trackingId': tracking_id})


@app.route('/api/validate/<section>', methods=['POST'])
def api_validate_section(section):
    if section not in SECTIONS:
        return jsonify({'error': f"Unknown section '{section}'", 'sections': list(SECTIONS)}), 404
    errors = validate_section(section, request.get_json(silent=True))
    return jsonify({'valid': not errors, 'errors': errors}), (200 if not errors else 400)


@app.route('/api/reference')
def api_reference():
    return jsonify({
        'industries': list(rt.INDUSTRIES), 'companySizes': list(rt.COMPANY_SIZES),
        'locations': list(rt.LOCATIONS), 'revenueRanges': list(rt.REVENUE_RANGES),
        'growthStages': list(rt.GROWTH_STAGES), 'painPoints': list(rt.PAIN_POINTS),
        'businessObjectives': list(rt.BUSINESS_OBJECTIVES), 'techBarriers': list(rt.TECH_BARRIERS),
        'priorityAreas': list(rt.PRIORITY_AREAS), 'budgetRanges': list(rt.BUDGET_RANGES),
        'timelines': list(rt.TIMELINES), 'implementationTypes': list(rt.IMPLEMENTATION_TYPES),
        'decisionMakers': list(rt.DECISION_MAKERS),
        'techBudgetPercentages': list(rt.TECH_BUDGET_PERCENTAGES),
    })


@app.route('/api/health')
def api_health():
    config = STATE['config']
    return jsonify({
        'project': 'hawaii-growth-calculator',
        'status': 'ok',
        'timestamp': time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime()),
        'integrations': {
            'hubspotApi': bool(config['hubspotAccessToken']),
            'hubspotForm': bool(config['hubspotPortalId'] and config['hubspotFormGuid']),
            'smtp': bool(config['smtpHost']),
        },
        'industries': len(STATE['tables']['industries']),
    })


@app.route('/api/export', methods=['POST'])
def api_export():
    """Re-run the calculation for the posted submission and return it as Excel."""
    try:
        data, results = _run(request.get_json(silent=True))
    except IntakeError as e:
        return jsonify({'success': False, **e.to_dict()}), 400

    try:
        buf = io.BytesIO()
        _build_workbook(data, results).save(buf)
        buf.seek(0)
    except Exception as e:
        traceback.print_exc()
        return jsonify({'error': str(e)}), 500
    company = data['companyInfo'].get('companyName', 'Results').replace(' ', '_')
    return send_file(buf, as_attachment=True, download_name=f'{company}_Growth_Calculator.xlsx',
                     mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')


# ══════════════════════════════════════════════════════════════
#  HELPERS
# ══════════════════════════════════════════════════════════════

def _build_workbook(data, results):
    import openpyxl
    from openpyxl.styles import Font, PatternFill, Alignment, Border, Side

    wb = openpyxl.Workbook()
    hf = Font(bold=True, color='FFFFFF', size=11)
    hfill = PatternFill(start_color='0066CC', end_color='0066CC', fill_type='solid')
    tb = Border(left=Side(style='thin'), right=Side(style='thin'),
                top=Side(style='thin'), bottom=Side(style='thin'))

    def ws_write(ws, headers, rows):
        for c, h in enumerate(headers, 1):
            cell = ws.cell(row=1, column=c, value=h)
            cell.font = hf; cell.fill = hfill; cell.alignment = Alignment(horizontal='center'); cell.border = tb
        for r, row in enumerate(rows, 2):
            for c, val in enumerate(row, 1):
                cell = ws.cell(row=r, column=c, value=val); cell.border = tb
        for col in ws.columns:
            ml = max(len(str(cell.value or '')) for cell in col)
            ws.column_dimensions[col[0].column_letter].width = min(ml + 2, 60)

    ci = data['companyInfo']; sol = results['recommendedSolution']
    fin = results['financials']; comp = results['competitiveAnalysis']
    payback = fin['paybackPeriodMonths']

    ws = wb.active; ws.title = 'Summary'
    ws_write(ws, ['Item', 'Value'], [
        ['Company', ci.get('companyName', '')],
        ['Industry', ci.get('industry', '')],
        ['Company Size', ci.get('companySize', '')],
        ['Location', ci.get('location', '')],
        ['Recommended Solution', sol['title']],
        ['Description', sol['description']],
        ['Features', '; '.join(sol['features'])],
        ['Benefits', '; '.join(sol['benefits'])],
    ])

    ws2 = wb.create_sheet('Financials')
    ws_write(ws2, ['Metric', 'Value'], [
        ['Monthly Investment', f"${fin['monthlyInvestment']:,}"],
        ['Implementation Cost', f"${fin['implementationCost']:,}"],
        ['Estimated Monthly Savings', f"${fin['estimatedMonthlySavings']:,}"],
        ['Estimated Annual Savings', f"${fin['estimatedAnnualSavings']:,}"],
        ['Payback Period', 'Never' if payback >= rt.NEVER_PAYBACK else f'{payback} months'],
        ['3-Year ROI', f"{fin['threeYearROIPercent']}%"],
        ['Total 3-Year Value', f"${fin['totalThreeYearValue']:,}"],
    ])

    ws3 = wb.create_sheet('Timeline')
    ws_write(ws3, ['Phase', 'Duration', 'Milestones'], [
        [p['name'], p['duration'], '; '.join(p['milestones'])] for p in results['timeline']
    ])

    ws4 = wb.create_sheet('Competitive')
    ent = comp['vsEnterprise']; sq = comp['vsStatusQuo']
    ws_write(ws4, ['Comparison', 'Metric', 'Value'], [
        ['vs Enterprise', 'Cost Difference', f"{ent['costDifferencePercent']}%"],
        ['vs Enterprise', 'Time to Implement', ent['timeToImplement']],
        ['vs Enterprise', 'Flexibility', ent['flexibility']],
        ['vs Status Quo', 'Efficiency Gains', f"{sq['efficiencyGainsPercent']}%"],
        ['vs Status Quo', 'Growth Potential', f"{sq['growthPotentialPercent']}%"],
        ['vs Status Quo', 'Risk Reduction', f"{sq['riskReductionPercent']}%"],
    ])
    return wb


if __name__ == '__main__':
    app.run(debug=False, host='0.0.0.0', port=int(os.environ.get('PORT', 5000)))
