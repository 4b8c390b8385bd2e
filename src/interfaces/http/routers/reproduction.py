from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status

from src.application.events.dispatcher import dispatch_events
from src.application.reproduction.constants import ReproductionConstants
from src.application.use_cases.reproduction import (
    get_due_dates,
    get_reproductive_status,
    reconcile_notifications,
    record_breeding,
    record_calving,
    record_pregnancy_check,
)
from src.application.use_cases.reproduction.get_reproductive_status import AnimalStatusView
from src.config.settings import Settings
from src.interfaces.http.deps import (
    get_app_settings,
    get_constants,
    get_current_user_id,
    get_uow,
)
from src.interfaces.http.schemas.reproduction import (
    AnimalStatusResponse,
    BreedingRecordCreate,
    BreedingRecordResponse,
    CalfResponse,
    CalvingCreate,
    CalvingResponse,
    DueDatesResponse,
    ErrorEntry,
    HerdStatusResponse,
    IssueEntry,
    PregnancyCheckInput,
    ReconcileResponse,
    UpsertEntry,
)
from src.utils.dates import to_day

router = APIRouter(prefix="/reproduction", tags=["reproduction"])


def _status_response(view: AnimalStatusView) -> AnimalStatusResponse:
    response = AnimalStatusResponse(
        animal_id=view.animal.id,
        ear_tag=view.animal.ear_tag,
        name=view.animal.name,
    )
    if view.error is not None:
        response.error = ErrorEntry(code=view.error.code, message=view.error.message)
        return response
    response.label = view.status.label.value
    response.category = view.status.category.value
    response.origin = view.status.origin.value
    response.days_since_calving = view.status.days_since_calving
    response.cycle_phase = view.cycle_phase.value if view.cycle_phase else None
    return response


def _schedule_reconcile(
    request: Request,
    background_tasks: BackgroundTasks,
    events: list,
    constants: ReproductionConstants,
    settings: Settings,
) -> None:
    # Post-commit: the pass must see the committed record
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory and events:
        background_tasks.add_task(
            dispatch_events,
            session_factory,
            events,
            constants=constants,
            lookahead_days=settings.notification_lookahead_days,
        )


@router.get("/status", response_model=HerdStatusResponse)
async def herd_status_endpoint(
    include_inactive: bool = False,
    user_id: UUID = Depends(get_current_user_id),
    constants: ReproductionConstants = Depends(get_constants),
    uow=Depends(get_uow),
):
    views = await get_reproductive_status.execute_for_herd(
        uow, user_id, constants=constants, active_only=not include_inactive
    )
    items = [_status_response(v) for v in views]
    return HerdStatusResponse(
        items=items,
        total=len(items),
        errors=sum(1 for item in items if item.error is not None),
    )


@router.get("/animals/{animal_id}/status", response_model=AnimalStatusResponse)
async def animal_status_endpoint(
    animal_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    constants: ReproductionConstants = Depends(get_constants),
    uow=Depends(get_uow),
):
    view = await get_reproductive_status.execute(uow, user_id, animal_id, constants=constants)
    return _status_response(view)


@router.get("/breeding-records/{record_id}/due-dates", response_model=DueDatesResponse)
async def due_dates_endpoint(
    record_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    constants: ReproductionConstants = Depends(get_constants),
    uow=Depends(get_uow),
):
    view = await get_due_dates.execute(uow, user_id, record_id, constants=constants)
    response = DueDatesResponse(
        breeding_record_id=record_id,
        post_pd_treatment_due=view.record.post_pd_treatment_due_date,
        keep_in_breeding_until=view.record.keep_in_breeding_until,
        reopen_date=view.record.reopen_date,
    )
    if view.due is not None:
        response.pregnancy_check_due = view.due.pregnancy_check_due
        response.expected_calving_due = view.due.expected_calving_due
        response.heat_check_due = view.due.heat_check_due
    return response


@router.post("/reconcile", response_model=ReconcileResponse)
async def reconcile_endpoint(
    user_id: UUID = Depends(get_current_user_id),
    constants: ReproductionConstants = Depends(get_constants),
    settings: Settings = Depends(get_app_settings),
    uow=Depends(get_uow),
):
    report = await reconcile_notifications.execute(
        uow,
        user_id,
        constants=constants,
        lookahead_days=settings.notification_lookahead_days,
    )
    await uow.commit()
    return ReconcileResponse(
        upserts=[
            UpsertEntry(
                dedup_key=u.dedup_key,
                type=u.type,
                animal_id=u.animal_id,
                scheduled_for=u.scheduled_for,
                title=u.title,
            )
            for u in report.upserts
        ],
        written=report.written,
        flagged_records=report.flagged_records,
        issues=[
            IssueEntry(subject_id=i.subject_id, code=i.code, message=i.message)
            for i in report.issues
        ],
    )


@router.post(
    "/breeding-records", response_model=BreedingRecordResponse, status_code=status.HTTP_201_CREATED
)
async def create_breeding_record_endpoint(
    payload: BreedingRecordCreate,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: UUID = Depends(get_current_user_id),
    constants: ReproductionConstants = Depends(get_constants),
    settings: Settings = Depends(get_app_settings),
    uow=Depends(get_uow),
):
    record = await record_breeding.execute(
        uow,
        user_id,
        record_breeding.RecordBreedingInput(
            animal_id=payload.animal_id,
            breeding_date=payload.breeding_date,
            method=payload.method,
            sire_id=payload.sire_id,
            notes=payload.notes,
        ),
    )
    await uow.commit()
    _schedule_reconcile(request, background_tasks, uow.drain_events(), constants, settings)
    return record


@router.patch(
    "/breeding-records/{record_id}/pregnancy-check", response_model=BreedingRecordResponse
)
async def pregnancy_check_endpoint(
    record_id: UUID,
    payload: PregnancyCheckInput,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: UUID = Depends(get_current_user_id),
    constants: ReproductionConstants = Depends(get_constants),
    settings: Settings = Depends(get_app_settings),
    uow=Depends(get_uow),
):
    record = await record_pregnancy_check.execute(
        uow,
        user_id,
        record_pregnancy_check.RecordPregnancyCheckInput(
            breeding_record_id=record_id,
            result=payload.result,
            check_date=payload.check_date,
        ),
        constants=constants,
    )
    await uow.commit()
    _schedule_reconcile(request, background_tasks, uow.drain_events(), constants, settings)
    return record


@router.post("/calvings", response_model=CalvingResponse, status_code=status.HTTP_201_CREATED)
async def create_calving_endpoint(
    payload: CalvingCreate,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: UUID = Depends(get_current_user_id),
    constants: ReproductionConstants = Depends(get_constants),
    settings: Settings = Depends(get_app_settings),
    uow=Depends(get_uow),
):
    result = await record_calving.execute(
        uow,
        user_id,
        record_calving.RecordCalvingInput(
            animal_id=payload.animal_id,
            calving_date=payload.calving_date,
            calf_ear_tag=payload.calf_ear_tag,
            calf_sex=payload.calf_sex,
            birth_weight=payload.birth_weight,
            complications=payload.complications,
            assistance_required=payload.assistance_required,
            notes=payload.notes,
        ),
    )
    await uow.commit()
    _schedule_reconcile(request, background_tasks, uow.drain_events(), constants, settings)
    return CalvingResponse(
        id=result.calving.id,
        animal_id=result.calving.animal_id,
        calving_date=to_day(result.calving.calving_date),
        breeding_record_id=result.calving.breeding_record_id,
        calf=CalfResponse.model_validate(result.calf) if result.calf else None,
    )
