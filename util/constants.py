class InternalURIs:
    API = "/api"
    V1 = API + "/v1"
    JOBS = V1 + "/jobs"
    JOB_AVERAGE = JOBS + "/{job_type}/average"
    JOB_PROGRESS = JOBS + "/{job_type}/{job_id}"
    CANCEL_JOB = JOB_PROGRESS + "/cancel"
